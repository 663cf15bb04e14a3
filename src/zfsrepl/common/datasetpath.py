from __future__ import annotations
from collections.abc import Iterable

from .exception import DatasetPathError


FORBIDDEN_CHARS = '@#|\t <>*'


def _validate_component(value: str, comp: str) -> None:
  if not comp:
    raise DatasetPathError(value, "must not contain empty components")
  if '/' in comp:
    raise DatasetPathError(value, "components must not contain a '/'")
  if any(c in FORBIDDEN_CHARS for c in comp):
    raise DatasetPathError(value, f"contains forbidden characters (any of {FORBIDDEN_CHARS!r})")


class DatasetPath:
  """Name of a dataset as a list of components.

  Paths are mutable: `extend`, `trim_prefix` and `trim_leading_components` work in place,
  so `copy()` a path before modifying one that is shared.
  """
  _comps: list[str]

  def __init__(self, comps: Iterable[str] = ()) -> None:
    self._comps = list(comps)

  @classmethod
  def parse(cls, value: str) -> DatasetPath:
    if value == '':
      return cls()
    if value.endswith('/'):
      raise DatasetPathError(value, "must not end with a '/'")
    comps = value.split('/')
    for comp in comps:
      _validate_component(value, comp)
    return cls(comps)

  @classmethod
  def deserialize(cls, comps: Iterable[str]) -> DatasetPath:
    comps = list(comps)
    for comp in comps:
      _validate_component('/'.join(comps), comp)
    return cls(comps)

  def serialize(self) -> list[str]:
    return list(self._comps)

  def __str__(self) -> str:
    return '/'.join(self._comps)

  def __repr__(self) -> str:
    return f"DatasetPath('{self}')"

  def __len__(self) -> int:
    return len(self._comps)

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, DatasetPath):
      return NotImplemented
    return self._comps == other._comps

  def is_empty(self) -> bool:
    return not self._comps

  def copy(self) -> DatasetPath:
    return DatasetPath(self._comps)

  def __copy__(self) -> DatasetPath:
    return self.copy()

  def __deepcopy__(self, memo: dict) -> DatasetPath:
    return self.copy()

  def extend(self, other: DatasetPath) -> None:
    self._comps += other._comps

  def has_prefix(self, prefix: DatasetPath) -> bool:
    if len(prefix) > len(self):
      return False
    return self._comps[:len(prefix)] == prefix._comps

  def trim_prefix(self, prefix: DatasetPath) -> None:
    """Removes `prefix` from the front. Does nothing if `prefix` is not a prefix of this path."""
    if not self.has_prefix(prefix):
      return
    self._comps = self._comps[len(prefix):]

  def trim_leading_components(self, n: int) -> None:
    n = max(0, min(n, len(self)))
    self._comps = self._comps[n:]
