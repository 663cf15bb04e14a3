#!/usr/bin/env python3

from __future__ import annotations
from collections.abc import Sequence
from typing import cast
import logging
import sys

from .setup_logging import setup_logging
from .args import get_args
from .commands import (
  list as _list,
  versions as _versions,
  version as _version
)

log = logging.getLogger(__name__)


def cli(argv: Sequence[str] | None = None):
    args = get_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        _entrypoint(args)
    except Exception as e:
        log.error(e)
        sys.exit(1)


def _entrypoint(args):
    s = args.subcommand
    args.__delattr__("subcommand")

    match s:
        case 'list':
            _list.entrypoint(cast(_list.Args, args))
        case 'versions':
            _versions.entrypoint(cast(_versions.Args, args))
        case 'version':
            _version.entrypoint(cast(_version.Args, args))
        case _:
            assert False
