from __future__ import annotations
from subprocess import Popen, PIPE
from typing import Optional, IO
from collections.abc import Collection, Iterator
from abc import ABC, abstractmethod
import logging
import shutil
import threading

from .datasetpath import DatasetPath
from .exception import PropertyNameError, ZfsOutputError
from .list_stream import ZfsListStream
from .metrics import ZFS_SNAPSHOT_DURATION, ZFS_BOOKMARK_DURATION
from .process import check_returncode, decode_output
from .transfer import SendStream, RecvWriter
from .versions import FilesystemVersion, VERSION_PROPS
from .filter import FilesystemVersionFilter


log = logging.getLogger(__name__)


class ZfsProperty:
  NAME = 'name'
  GUID = 'guid'
  CREATETXG = 'createtxg'
  CREATION = 'creation'
  RECEIVE_RESUME_TOKEN = 'receive_resume_token'


# value zfs prints for an unset property
UNSET = '-'


class ZfsProperties:
  """Property names mapped to values. Names must not contain '='."""
  _props: dict[str, str]

  def __init__(self, props: Optional[dict[str, str]] = None) -> None:
    self._props = {}
    for key, value in (props or {}).items():
      self.set(key, value)

  def set(self, key: str, value: str) -> None:
    if '=' in key:
      raise PropertyNameError(key)
    self._props[key] = value

  def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
    return self._props.get(key, default)

  def __getitem__(self, key: str) -> str:
    return self._props[key]

  def __contains__(self, key: object) -> bool:
    return key in self._props

  def __len__(self) -> int:
    return len(self._props)

  def __iter__(self) -> Iterator[str]:
    return iter(self._props)

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, ZfsProperties):
      return NotImplemented
    return self._props == other._props

  def __repr__(self) -> str:
    return f"ZfsProperties({self._props})"

  def items(self):
    return self._props.items()

  def to_args(self) -> list[str]:
    args = []
    for key, value in self._props.items():
      if '=' in key:
        raise PropertyNameError(key)
      args.append(f'{key}={value}')
    return args


def snapshot_name(fs: DatasetPath, name: str) -> str:
  return f'{fs}@{name}'

def bookmark_name(fs: DatasetPath, name: str) -> str:
  return f'{fs}#{name}'


"""
Each method call corresponds to exactly one zfs invocation
"""
class ZfsCli(ABC):
  zfs_binary: str

  def __init__(self, zfs_binary: str = 'zfs') -> None:
    self.zfs_binary = zfs_binary

  @abstractmethod
  def _start_command(self, cmd: list[str], stdin=None, stdout=None, stderr=None) -> Popen[bytes]: ...

  def _zfs(self, *args: str) -> list[str]:
    return [self.zfs_binary, *args]

  def _run_command(self, cmd: list[str]) -> tuple[Popen[bytes], bytes, bytes]:
    log.debug(f"Running {' '.join(cmd)}")
    p = self._start_command(cmd, stdout=PIPE, stderr=PIPE)
    stdout, stderr = p.communicate()
    return p, stdout, stderr

  def _run_checked_command(self, cmd: list[str]) -> bytes:
    p, stdout, stderr = self._run_command(cmd)
    check_returncode(p, stderr)
    return stdout

  def list(self, properties: Collection[str], *args: str) -> list[list[str]]:
    """Runs `zfs list` and returns one row of fields per line, one field per property"""
    properties = list(properties)
    p, stdout, stderr = self._run_command(self._zfs('list', '-H', '-p', '-o', ','.join(properties), *args))

    rows: list[list[str]] = []
    for line in decode_output(stdout).splitlines():
      fields = line.split('\t', len(properties) - 1)
      if len(fields) != len(properties):
        raise ZfsOutputError(f"Unexpected zfs list output: {line!r}")
      rows.append(fields)

    check_returncode(p, stderr)
    return rows

  def list_stream(
    self,
    properties: Collection[str],
    *args: str,
    cancel: Optional[threading.Event] = None,
    maxsize: int = 1
  ) -> ZfsListStream:
    """Like `list`, but the rows are read while zfs is still running. See `ZfsListStream`."""
    properties = list(properties)
    cmd = self._zfs('list', '-H', '-p', '-o', ','.join(properties), *args)

    def start() -> Popen[bytes]:
      log.debug(f"Running {' '.join(cmd)}")
      return self._start_command(cmd, stdout=PIPE, stderr=PIPE)

    return ZfsListStream(start, len(properties), cancel=cancel, maxsize=maxsize)

  def get(self, fs: DatasetPath, names: Collection[str]) -> ZfsProperties:
    names = list(names)
    cmd = self._zfs('get', '-Hp', '-o', 'property,value', ','.join(names), str(fs))
    lines = decode_output(self._run_checked_command(cmd)).splitlines()
    if len(lines) != len(names):
      raise ZfsOutputError(f"zfs get returned {len(lines)} values for {len(names)} properties")

    props = ZfsProperties()
    for line in lines:
      fields = line.split()
      if len(fields) != 2:
        raise ZfsOutputError(f"zfs get did not return a property value pair: {line!r}")
      props.set(fields[0], fields[1])
    return props

  def set(self, fs: DatasetPath, props: ZfsProperties) -> None:
    cmd = self._zfs('set', *props.to_args(), str(fs))
    self._run_checked_command(cmd)

  def destroy(self, name: str) -> None:
    self._run_checked_command(self._zfs('destroy', name))

  def snapshot(self, fs: DatasetPath, name: str, recursive: bool = False) -> None:
    with ZFS_SNAPSHOT_DURATION.labels(filesystem=str(fs)).time():
      cmd = self._zfs('snapshot')
      if recursive:
        cmd += ['-r']
      cmd += [snapshot_name(fs, name)]
      self._run_checked_command(cmd)

  def bookmark(self, fs: DatasetPath, snapshot: str, bookmark: str) -> None:
    with ZFS_BOOKMARK_DURATION.labels(filesystem=str(fs)).time():
      cmd = self._zfs('bookmark', snapshot_name(fs, snapshot), bookmark_name(fs, bookmark))
      self._run_checked_command(cmd)

  def send(self, fs: DatasetPath, from_version: FilesystemVersion, to_version: Optional[FilesystemVersion] = None) -> SendStream:
    """Full send of `from_version`, or incremental send from `from_version` to `to_version`"""
    if to_version is None:
      cmd = self._zfs('send', from_version.to_abs_path(fs))
    else:
      cmd = self._zfs('send', '-i', from_version.to_abs_path(fs), to_version.to_abs_path(fs))
    log.debug(f"Running {' '.join(cmd)}")
    return SendStream(self._start_command(cmd, stdout=PIPE, stderr=PIPE))

  def recv_writer(self, fs: DatasetPath, *args: str) -> RecvWriter:
    cmd = self._zfs('recv', *args, str(fs))
    log.debug(f"Running {' '.join(cmd)}")
    return RecvWriter(self._start_command(cmd, stdin=PIPE, stdout=PIPE, stderr=PIPE))

  def recv(self, fs: DatasetPath, stream: IO[bytes], *args: str) -> None:
    with self.recv_writer(fs, *args) as writer:
      shutil.copyfileobj(stream, writer)  # type: ignore[misc]

  def list_filesystem_versions(self, fs: DatasetPath, version_filter: Optional[FilesystemVersionFilter] = None) -> list[FilesystemVersion]:
    """Snapshots and bookmarks of `fs`, oldest first"""
    rows = self.list(VERSION_PROPS, '-r', '-d', '1', '-t', 'snapshot,bookmark', '-s', ZfsProperty.CREATETXG, str(fs))

    versions: list[FilesystemVersion] = []
    for row in rows:
      dataset, version = FilesystemVersion.from_list_row(row)
      if dataset != str(fs):
        raise ZfsOutputError(f"zfs list returned version '{row[0]}' that does not belong to '{fs}'")
      if version_filter is not None and not version_filter.filter(version):
        continue
      versions.append(version)
    return versions

  def get_receive_resume_token(self, fs: DatasetPath) -> str:
    """The resume token of a partially received `fs`, or an empty string"""
    token = self.get(fs, [ZfsProperty.RECEIVE_RESUME_TOKEN])[ZfsProperty.RECEIVE_RESUME_TOKEN]
    return '' if token == UNSET else token


class LocalZfsCli(ZfsCli):
  def _start_command(self, cmd: list[str], stdin=None, stdout=None, stderr=None) -> Popen[bytes]:
    return Popen(cmd, stdin=stdin, stdout=stdout, stderr=stderr)
