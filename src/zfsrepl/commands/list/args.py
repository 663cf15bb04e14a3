from __future__ import annotations
from dataclasses import dataclass
from argparse import ArgumentParser

from zfsrepl.common.args import CommonArgs


@dataclass
class Args(CommonArgs):
  ...


def setup(parser: ArgumentParser) -> None:
  ...
