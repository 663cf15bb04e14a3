from __future__ import annotations
from datetime import datetime
from typing import Optional, Protocol, Callable
from dateutil.relativedelta import relativedelta

from .datasetpath import DatasetPath
from .versions import FilesystemVersion, VersionType


class DatasetFilter(Protocol):
  def filter(self, path: DatasetPath) -> bool:
    """Returns whether `path` passes. Raises if the decision cannot be made."""
    ...


class DatasetMapFilter(DatasetFilter, Protocol):
  def inverted_filter(self) -> DatasetFilter:
    """The filter for the opposite replication direction"""
    ...


class FilesystemVersionFilter(Protocol):
  def filter(self, version: FilesystemVersion) -> bool: ...


class LocalPullACL:
  """Lets every dataset through. Used when pulling from the local machine."""
  def filter(self, path: DatasetPath) -> bool:
    return True

  def inverted_filter(self) -> DatasetFilter:
    return self


class PrefixVersionFilter:
  prefix: str
  version_type: Optional[VersionType]

  def __init__(self, prefix: str, version_type: Optional[VersionType] = None) -> None:
    self.prefix = prefix
    self.version_type = version_type

  def filter(self, version: FilesystemVersion) -> bool:
    if self.version_type is not None and version.type != self.version_type:
      return False
    return version.name.startswith(self.prefix)


class CreatedWithinVersionFilter:
  """Keeps versions created within `within` before now"""
  within: relativedelta

  def __init__(self, within: relativedelta, now: Callable[[], datetime] = datetime.now) -> None:
    self.within = within
    self._now = now

  def filter(self, version: FilesystemVersion) -> bool:
    return version.creation > self._now() - self.within


class AllVersionFilters:
  """Passes a version only if every one of `filters` passes it"""
  def __init__(self, *filters: FilesystemVersionFilter) -> None:
    self.filters = filters

  def filter(self, version: FilesystemVersion) -> bool:
    return all(f.filter(version) for f in self.filters)
