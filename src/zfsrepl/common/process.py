from __future__ import annotations
from subprocess import Popen, CalledProcessError, TimeoutExpired
from typing import IO, Callable, Optional
from functools import partial
import logging
import threading

from .exception import ZfsError, ZfsOutputError


log = logging.getLogger(__name__)

# only the tail of a process's stderr is kept
MAX_STDERR_BYTES = 64 * 1024
CHUNK_SIZE = 64 * 1024
TERMINATE_TIMEOUT = 5


class TailBuffer:
  """Byte buffer that keeps at most the last `limit` bytes written to it"""
  def __init__(self, limit: int = MAX_STDERR_BYTES) -> None:
    self._buf = bytearray()
    self._limit = limit
    self._lock = threading.Lock()

  def write(self, data: bytes) -> None:
    with self._lock:
      self._buf += data
      if len(self._buf) > self._limit:
        del self._buf[:-self._limit]

  def getvalue(self) -> bytes:
    with self._lock:
      return bytes(self._buf)


def start_drain_thread(pipe: IO[bytes], sink: Optional[Callable[[bytes], None]] = None) -> threading.Thread:
  """Reads `pipe` until EOF in a background thread, passing the data to `sink` or discarding it"""
  def _reader():
    with pipe:
      for chunk in iter(partial(pipe.read1, CHUNK_SIZE), b''):  # type: ignore[attr-defined]
        if sink is not None:
          sink(chunk)
  t = threading.Thread(target=_reader, daemon=True)
  t.start()
  return t


def check_returncode(proc: Popen, stderr: bytes) -> None:
  if proc.returncode != 0:
    raise ZfsError(stderr[-MAX_STDERR_BYTES:], CalledProcessError(proc.returncode, cmd=proc.args))


def decode_output(data: bytes) -> str:
  try:
    return data.decode('utf-8')
  except UnicodeDecodeError as e:
    raise ZfsOutputError(f"zfs output is not valid UTF-8: {data[max(e.start - 32, 0):e.end + 32]!r}") from e


def terminate_and_reap(proc: Popen) -> None:
  """Stops `proc` if it is still running and waits for it, so that no zombie is left behind"""
  if proc.poll() is None:
    log.debug(f"Terminating process {proc.pid}")
    proc.terminate()
  try:
    proc.wait(timeout=TERMINATE_TIMEOUT)
  except TimeoutExpired:
    log.warning(f"Process {proc.pid} did not terminate, killing it")
    proc.kill()
    proc.wait()
