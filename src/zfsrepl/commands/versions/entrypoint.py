from __future__ import annotations
import logging

from zfsrepl.common.duration import parse_duration
from zfsrepl.common.filter import AllVersionFilters, CreatedWithinVersionFilter, FilesystemVersionFilter, PrefixVersionFilter
from zfsrepl.common.utils import Field, get_local_puller, log_table
from zfsrepl.common.versions import FilesystemVersion
from .args import Args


log = logging.getLogger(__name__)


def get_version_filter(args: Args) -> FilesystemVersionFilter:
  filters: list[FilesystemVersionFilter] = [PrefixVersionFilter(args.prefix, args.type)]
  if args.within is not None:
    filters.append(CreatedWithinVersionFilter(parse_duration(args.within)))
  return AllVersionFilters(*filters)


def entrypoint(args: Args) -> None:
  puller = get_local_puller(args, version_filter=get_version_filter(args))
  versions = puller.list_filesystem_versions(args.filesystem)
  if not versions:
    log.info(f"No matching versions of '{args.filesystem}'")
    return

  fields: list[Field[FilesystemVersion]] = [
    Field('NAME',      lambda v: v.rel_name),
    Field('TYPE',      lambda v: str(v.type)),
    Field('GUID',      lambda v: str(v.guid)),
    Field('CREATETXG', lambda v: str(v.createtxg)),
    Field('CREATION',  lambda v: str(v.creation))
  ]
  log_table(fields, versions)
