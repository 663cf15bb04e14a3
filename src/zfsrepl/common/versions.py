from __future__ import annotations
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from .datasetpath import DatasetPath
from .exception import ZfsOutputError


class VersionType(StrEnum):
  SNAPSHOT = 'snapshot'
  BOOKMARK = 'bookmark'

  @property
  def delimiter(self) -> str:
    return '@' if self is VersionType.SNAPSHOT else '#'


# properties fetched for every filesystem version, in this order
VERSION_PROPS = ['name', 'guid', 'createtxg', 'creation']


@dataclass(eq=True, frozen=True)
class FilesystemVersion:
  type: VersionType
  name: str
  guid: int
  createtxg: int
  creation: datetime

  @property
  def rel_name(self) -> str:
    return f'{self.type.delimiter}{self.name}'

  def to_abs_path(self, fs: DatasetPath) -> str:
    return f'{fs}{self.rel_name}'

  @classmethod
  def from_list_row(cls, fields: Sequence[str]) -> tuple[str, FilesystemVersion]:
    """Parses a row of `VERSION_PROPS`. Returns the dataset name together with the version."""
    if len(fields) != len(VERSION_PROPS):
      raise ZfsOutputError(f"Expected {len(VERSION_PROPS)} fields, got {len(fields)}: {fields!r}")
    fullname, guid, createtxg, creation = fields

    for vtype in VersionType:
      dataset, delim, name = fullname.partition(vtype.delimiter)
      if delim and dataset and name:
        break
    else:
      raise ZfsOutputError(f"'{fullname}' is neither a snapshot nor a bookmark")

    try:
      version = cls(
        type=vtype,
        name=name,
        guid=int(guid),
        createtxg=int(createtxg),
        creation=datetime.fromtimestamp(int(creation))
      )
    except ValueError as e:
      raise ZfsOutputError(f"Cannot parse version '{fullname}': {e}") from e
    return dataset, version
