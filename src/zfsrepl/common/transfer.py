from __future__ import annotations
from subprocess import Popen
import io
import logging

from .exception import ZfsError
from .process import TailBuffer, start_drain_thread, check_returncode, terminate_and_reap


log = logging.getLogger(__name__)


class SendStream(io.RawIOBase):
  """
  Readable stream over the stdout of a running `zfs send`.

  Once the end of the stream is reached, the process is waited for and a nonzero exit raises `ZfsError`
  from `read()`. Closing the stream early terminates the process.
  """

  def __init__(self, proc: Popen[bytes]) -> None:
    super().__init__()
    assert proc.stdout is not None and proc.stderr is not None
    self._proc = proc
    self._stdout = proc.stdout
    self._stderr = TailBuffer()
    self._stderr_thread = start_drain_thread(proc.stderr, self._stderr.write)
    self._finished = False

  @property
  def proc(self) -> Popen[bytes]:
    return self._proc

  def readable(self) -> bool:
    return True

  def readinto(self, b) -> int:
    if self._finished:
      return 0
    n = self._stdout.readinto1(b)
    if n == 0:
      self._finish()
    return n

  def _finish(self) -> None:
    self._finished = True
    self._proc.wait()
    self._stderr_thread.join()
    check_returncode(self._proc, self._stderr.getvalue())

  def close(self) -> None:
    if self.closed:
      return
    try:
      if self._proc.poll() is None:
        log.debug("zfs send stream closed before end of stream")
      terminate_and_reap(self._proc)
      self._stdout.close()
      self._stderr_thread.join()
    finally:
      super().close()


class RecvWriter:
  """
  Writable sink feeding the stdin of a running `zfs recv`.

  `close()` signals the end of the stream, waits for the process and raises `ZfsError` if it failed.
  `abort()` terminates the process instead. Used as a context manager, a clean exit closes the writer
  and an exception aborts it.
  """

  def __init__(self, proc: Popen[bytes]) -> None:
    assert proc.stdin is not None and proc.stdout is not None and proc.stderr is not None
    self._proc = proc
    self._stdin = proc.stdin
    self._stderr = TailBuffer()
    self._threads = [
      # some zfs implementations fail the receive if stdout is not connected, so drain and discard it
      start_drain_thread(proc.stdout),
      start_drain_thread(proc.stderr, self._stderr.write)
    ]
    self._closed = False

  @property
  def proc(self) -> Popen[bytes]:
    return self._proc

  @property
  def closed(self) -> bool:
    return self._closed

  def writable(self) -> bool:
    return True

  def write(self, data: bytes) -> int:
    if self._closed:
      raise ValueError("write to closed RecvWriter")
    try:
      self._stdin.write(data)
    except BrokenPipeError as e:
      # zfs recv exited early; its exit status is more useful than the broken pipe
      try:
        self._finish()
      except ZfsError as err:
        raise err from e
      raise
    return len(data)

  def flush(self) -> None:
    if not self._closed:
      self._stdin.flush()

  def close(self) -> None:
    if self._closed:
      return
    self._finish()

  def abort(self) -> None:
    if self._closed:
      return
    self._closed = True
    log.debug(f"Aborting zfs recv (pid {self._proc.pid})")
    terminate_and_reap(self._proc)
    self._close_stdin()
    for t in self._threads:
      t.join()

  def _finish(self) -> None:
    self._closed = True
    self._close_stdin()
    self._proc.wait()
    for t in self._threads:
      t.join()
    check_returncode(self._proc, self._stderr.getvalue())

  def _close_stdin(self) -> None:
    try:
      self._stdin.close()
    except BrokenPipeError:
      # the process is gone, its exit status is checked by the caller
      pass

  def __enter__(self) -> RecvWriter:
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    if exc_type is None:
      self.close()
    else:
      self.abort()

