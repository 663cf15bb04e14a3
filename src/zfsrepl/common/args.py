from __future__ import annotations
from typing import Protocol


# environment variable overriding the default zfs executable
ZFS_BINARY_ENV = 'ZFSREPL_ZFS_BINARY'


class CommonArgs(Protocol):
  zfs_binary: str
  verbose: bool
