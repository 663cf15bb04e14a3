from __future__ import annotations
import logging

from zfsrepl.common.replication import Filesystem
from zfsrepl.common.utils import Field, get_local_puller, log_table
from .args import Args


log = logging.getLogger(__name__)


def entrypoint(args: Args) -> None:
  puller = get_local_puller(args)
  fss = puller.list_filesystems()

  fields: list[Field[Filesystem]] = [
    Field('FILESYSTEM',   lambda fs: fs.path),
    Field('RESUME TOKEN', lambda fs: fs.resume_token or '-')
  ]
  log_table(fields, fss)
