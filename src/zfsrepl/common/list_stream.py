from __future__ import annotations
from collections.abc import Iterator
from dataclasses import dataclass
from queue import Queue, Empty, Full
from subprocess import Popen
from typing import Callable, Optional
import logging
import threading

from .exception import ZfsError, ZfsOutputError
from .process import TailBuffer, start_drain_thread, check_returncode, decode_output, terminate_and_reap


log = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


@dataclass(frozen=True)
class ZfsListResult:
  fields: Optional[list[str]] = None
  error: Optional[BaseException] = None


class _Closed:
  pass

_CLOSED = _Closed()


class ZfsListStream:
  """
  Runs `zfs list` in a background thread and hands the rows over a bounded queue.

  The stream can be iterated exactly once. Iteration yields the rows in the order zfs printed them
  and raises the first error, which also ends the stream. Setting `cancel` or calling `close()` stops
  delivery and terminates the zfs process.

  A stream that is neither drained nor cancelled nor closed keeps the zfs process alive, because the
  producer waits for the consumer to take the next row. Use it as a context manager to be safe:

    with cli.list_stream(['name']) as rows:
      for name, in rows:
        ...
  """

  def __init__(
    self,
    start: Callable[[], Popen[bytes]],
    nfields: int,
    cancel: Optional[threading.Event] = None,
    maxsize: int = 1
  ) -> None:
    self._start = start
    self._nfields = nfields
    self._cancel = cancel if cancel is not None else threading.Event()
    self._closed = threading.Event()
    self._queue: Queue[ZfsListResult | _Closed] = Queue(maxsize=maxsize)
    self._iterated = False
    self._thread = threading.Thread(target=self._produce, daemon=True)
    self._thread.start()

  @property
  def cancelled(self) -> bool:
    return self._cancel.is_set() or self._closed.is_set()

  def __iter__(self) -> Iterator[list[str]]:
    if self._iterated:
      raise RuntimeError("ZfsListStream can only be iterated once")
    self._iterated = True
    return self._rows()

  def __enter__(self) -> ZfsListStream:
    return self

  def __exit__(self, *exc) -> None:
    self.close()

  def close(self) -> None:
    """Cancels the stream and waits until the zfs process has been reaped"""
    self._closed.set()
    self._thread.join()

  def _rows(self) -> Iterator[list[str]]:
    while True:
      item = self._receive()
      if isinstance(item, _Closed):
        return
      if item.error is not None:
        raise item.error
      assert item.fields is not None
      yield item.fields

  def _receive(self) -> ZfsListResult | _Closed:
    while not self.cancelled:
      try:
        return self._queue.get(timeout=POLL_INTERVAL)
      except Empty:
        continue
    return _CLOSED

  def _send(self, item: ZfsListResult | _Closed) -> bool:
    """Returns False if the stream was cancelled before the consumer took `item`"""
    while not self.cancelled:
      try:
        self._queue.put(item, timeout=POLL_INTERVAL)
        return True
      except Full:
        continue
    return False

  def _produce(self) -> None:
    try:
      self._scan()
    finally:
      self._send(_CLOSED)

  def _scan(self) -> None:
    try:
      proc = self._start()
    except OSError as e:
      self._send(ZfsListResult(error=e))
      return

    watcher = threading.Thread(target=self._watch_cancel, args=(proc,), daemon=True)
    watcher.start()
    stderr = TailBuffer()
    assert proc.stdout is not None and proc.stderr is not None
    stderr_thread = start_drain_thread(proc.stderr, stderr.write)
    try:
      for raw in proc.stdout:
        try:
          line = decode_output(raw).rstrip('\n').rstrip('\r')
        except ZfsOutputError as e:
          self._send(ZfsListResult(error=e))
          return
        fields = line.split('\t', self._nfields - 1)
        if len(fields) != self._nfields:
          self._send(ZfsListResult(error=ZfsOutputError(f"Unexpected zfs list output: {line!r}")))
          return
        if not self._send(ZfsListResult(fields=fields)):
          return

      proc.wait()
      stderr_thread.join()
      if not self.cancelled:
        try:
          check_returncode(proc, stderr.getvalue())
        except ZfsError as e:
          self._send(ZfsListResult(error=e))
    finally:
      terminate_and_reap(proc)
      proc.stdout.close()
      stderr_thread.join()
      watcher.join()

  def _watch_cancel(self, proc: Popen[bytes]) -> None:
    while proc.poll() is None:
      if self.cancelled:
        log.debug(f"zfs list cancelled, terminating process {proc.pid}")
        proc.terminate()
        return
      self._closed.wait(POLL_INTERVAL)
