from __future__ import annotations
from collections.abc import Sequence
from typing import cast
import argparse
import os

from .common.args import CommonArgs as CommonArgs, ZFS_BINARY_ENV
from .commands import (
  list as _list,
  versions as _versions,
  version as _version
)


class Args(CommonArgs):
    subcommand: str


def get_args(argv: Sequence[str] | None = None) -> Args:
    # Parent parser for global/common options
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument('--zfs-binary', type=str, metavar="PATH")
    common.add_argument('-v', '--verbose', action='store_true')
    DEFAULTS = dict(
        zfs_binary=os.environ.get(ZFS_BINARY_ENV, 'zfs'),
        verbose=False
    )

    # create top-level parser
    parser = argparse.ArgumentParser('zfsrepl', parents=[common], formatter_class=CompactHelpFormatter)
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    # create subcommand parsers
    _list.args.setup(
        subparsers.add_parser('list', parents=[common])
    )
    _versions.args.setup(
        subparsers.add_parser('versions', parents=[common])
    )
    _version.args.setup(
        subparsers.add_parser('version')
    )

    # Merge global defaults in
    args = dict(parser.parse_args(argv)._get_kwargs())
    args = DEFAULTS | args

    return cast(Args, argparse.Namespace(**args))


class CompactHelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog):
        super().__init__(prog, max_help_position=40, width=120)
