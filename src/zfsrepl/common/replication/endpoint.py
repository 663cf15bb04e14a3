from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from ..transfer import SendStream, RecvWriter
from ..versions import FilesystemVersion


class EndpointKind(StrEnum):
  PULL = 'pull'
  PUSH = 'push'


class InitialReplPolicy(StrEnum):
  MOST_RECENT = 'most_recent'
  ALL = 'all'

DEFAULT_INITIAL_REPL_POLICY = InitialReplPolicy.MOST_RECENT


@dataclass(frozen=True)
class Filesystem:
  path: str
  resume_token: str = ''


@dataclass(frozen=True)
class SendRequest:
  filesystem: str
  from_version: FilesystemVersion
  to_version: Optional[FilesystemVersion] = None
  resume_token: str = ''


@dataclass(frozen=True)
class ReceiveRequest:
  filesystem: str
  resume_token: str = ''


class Endpoint(ABC):
  """One side of a replication, as seen by the replication planner"""
  kind: EndpointKind

  @abstractmethod
  def list_filesystems(self) -> list[Filesystem]: ...

  @abstractmethod
  def list_filesystem_versions(self, fs: str) -> list[FilesystemVersion]: ...

  @abstractmethod
  def send(self, request: SendRequest) -> SendStream: ...

  @abstractmethod
  def receive(self, request: ReceiveRequest) -> RecvWriter: ...
