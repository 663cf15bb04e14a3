from __future__ import annotations
from subprocess import CalledProcessError


class DatasetPathError(ValueError):
  def __init__(self, value: str, msg: str) -> None:
    super().__init__(f"Invalid dataset path '{value}': {msg}")
    self.value = value


class PropertyNameError(ValueError):
  def __init__(self, name: str) -> None:
    super().__init__(f"Property name '{name}' contains '=', which is the delimiter between property name and value")
    self.name = name


class ZfsError(Exception):
  """zfs exited with a nonzero status.

  `stderr` holds the captured standard error of the process, `cause` the exit status as a `CalledProcessError`.
  """
  stderr: bytes
  cause: CalledProcessError

  def __init__(self, stderr: bytes, cause: CalledProcessError) -> None:
    super().__init__(stderr, cause)
    self.stderr = stderr
    self.cause = cause

  def __str__(self) -> str:
    msg = f"zfs exited with error: {self.cause}"
    detail = self.stderr.decode('utf-8', errors='replace').strip()
    if detail:
      msg += f": {detail}"
    return msg


class ZfsOutputError(Exception):
  """Output of zfs did not have the expected shape"""


class ReplicationError(Exception):
  pass


class FilteredError(ReplicationError):
  def __init__(self, filesystem: str) -> None:
    super().__init__(f"Filesystem '{filesystem}' is filtered")
    self.filesystem = filesystem


class ResumeTokenMismatchError(ReplicationError):
  def __init__(self, filesystem: str, local_token: str, requested_token: str) -> None:
    super().__init__(
      f"Receive-side resume token of '{filesystem}' does not match send-side resume token"
      f" (local '{local_token}', requested '{requested_token}')"
    )
    self.filesystem = filesystem
    self.local_token = local_token
    self.requested_token = requested_token


class SendNotSupportedError(ReplicationError):
  pass
