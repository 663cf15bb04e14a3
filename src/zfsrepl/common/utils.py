from __future__ import annotations
from typing import Callable, Generic, Optional, TypeVar
from collections.abc import Collection
from dataclasses import dataclass
import logging

from .args import CommonArgs
from .filter import LocalPullACL, FilesystemVersionFilter
from .replication import Puller
from .zfs import LocalZfsCli


log = logging.getLogger(__name__)

T = TypeVar('T')

COLUMN_SEPARATOR = ' | '
HEADER_SEPARATOR = '-'


@dataclass
class Field(Generic[T]):
  name: str
  get: Callable[[T], str]


def log_table(fields: Collection[Field[T]], items: Collection[T]) -> None:
  widths: list[int] = [max(len(f.name), *(len(f.get(i)) for i in items), 0) for f in fields]
  total_width = (len(COLUMN_SEPARATOR) * ((len(fields) or 1) - 1)) + sum(widths)

  log.info(COLUMN_SEPARATOR.join(f.name.ljust(w) for f, w in zip(fields, widths)))
  log.info((HEADER_SEPARATOR * (total_width//len(HEADER_SEPARATOR) + 1))[:total_width])
  for item in items:
    log.info(COLUMN_SEPARATOR.join(f.get(item).ljust(w) for f, w in zip(fields, widths)))


def get_local_puller(args: CommonArgs, version_filter: Optional[FilesystemVersionFilter] = None) -> Puller:
  """A puller receiving into the local pool, accepting every dataset"""
  return Puller(
    remote=None,
    mapping=LocalPullACL(),
    cli=LocalZfsCli(zfs_binary=args.zfs_binary),
    version_filter=version_filter
  )
