from __future__ import annotations
from typing import Any, Optional
import logging

from ..datasetpath import DatasetPath
from ..exception import DatasetPathError, FilteredError, ResumeTokenMismatchError, SendNotSupportedError
from ..filter import DatasetFilter, DatasetMapFilter, FilesystemVersionFilter
from ..transfer import SendStream, RecvWriter
from ..versions import FilesystemVersion
from ..zfs import ZfsCli, ZfsProperty, UNSET
from .endpoint import (
  Endpoint, EndpointKind, Filesystem, InitialReplPolicy, ReceiveRequest, SendRequest,
  DEFAULT_INITIAL_REPL_POLICY
)


log = logging.getLogger(__name__)

# make interrupted receives resumable, so that a receive_resume_token is left behind
RECV_ARGS = ['-s']


class Puller(Endpoint):
  """
  Receiving side of a pull replication.

  The mapping describes which datasets may be replicated in the push direction. A puller applies its
  inverted filter, i.e. which datasets may be received locally. The inverted filter is derived again
  on every call, so that changes to the mapping take effect immediately.
  """
  kind = EndpointKind.PULL

  remote: Any
  mapping: DatasetMapFilter
  cli: ZfsCli
  initial_repl_policy: InitialReplPolicy
  version_filter: Optional[FilesystemVersionFilter]

  def __init__(
    self,
    remote: Any,
    mapping: DatasetMapFilter,
    cli: ZfsCli,
    initial_repl_policy: InitialReplPolicy = DEFAULT_INITIAL_REPL_POLICY,
    version_filter: Optional[FilesystemVersionFilter] = None
  ) -> None:
    self.remote = remote
    self.mapping = mapping
    self.cli = cli
    self.initial_repl_policy = initial_repl_policy
    self.version_filter = version_filter

  def _inverted_filter(self) -> DatasetFilter:
    return self.mapping.inverted_filter()

  def _check_filter(self, fs: str) -> DatasetPath:
    path = DatasetPath.parse(fs)
    if not self._inverted_filter().filter(path):
      log.warning(f"Filesystem '{fs}' is not allowed to be received")
      raise FilteredError(fs)
    return path

  def list_filesystems(self) -> list[Filesystem]:
    f = self._inverted_filter()
    props = [ZfsProperty.NAME, ZfsProperty.RECEIVE_RESUME_TOKEN]

    fss: list[Filesystem] = []
    with self.cli.list_stream(props) as rows:
      for name, token in rows:
        try:
          path = DatasetPath.parse(name)
        except DatasetPathError as e:
          log.warning(f"Skipping filesystem that cannot be received into: {e}")
          continue
        if not f.filter(path):
          log.debug(f"Skipping filtered filesystem '{name}'")
          continue
        if token == UNSET:
          token = ''
        fss.append(Filesystem(path=name, resume_token=token))
    return fss

  def list_filesystem_versions(self, fs: str) -> list[FilesystemVersion]:
    path = self._check_filter(fs)
    return self.cli.list_filesystem_versions(path, self.version_filter)

  def send(self, request: SendRequest) -> SendStream:
    raise SendNotSupportedError("Puller does not send")

  def receive(self, request: ReceiveRequest) -> RecvWriter:
    path = self._check_filter(request.filesystem)

    if request.resume_token:
      local_token = self.cli.get_receive_resume_token(path)
      if local_token != request.resume_token:
        raise ResumeTokenMismatchError(request.filesystem, local_token, request.resume_token)
      log.info(f"Resuming receive of '{request.filesystem}'")

    return self.cli.recv_writer(path, *RECV_ARGS)
