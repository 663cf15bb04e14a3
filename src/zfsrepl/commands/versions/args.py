from __future__ import annotations
from typing import Optional
from argparse import ArgumentParser

from zfsrepl.common.args import CommonArgs
from zfsrepl.common.versions import VersionType


class Args(CommonArgs):
  filesystem: str
  prefix: str
  type: Optional[VersionType]
  within: Optional[str]


def setup(parser: ArgumentParser) -> None:
  parser.add_argument('filesystem', metavar='FILESYSTEM')
  parser.add_argument('--prefix', type=str, default='')
  parser.add_argument('--type', type=VersionType, choices=list(VersionType), default=None)
  parser.add_argument('--within', type=str, metavar='DURATION', default=None, help="e.g. 1w3d")
