import threading

import pytest

from zfsrepl.common.exception import ZfsError, ZfsOutputError
from zfsrepl.common.zfs import LocalZfsCli

from fake_zfs import FakeResponse, FakeZfsCli


PROPS = ['name', 'receive_resume_token']


def test_rows_in_order():
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\nb\t-\nc\ttoken\n'))
    with cli.list_stream(PROPS, '-r', 'a') as stream:
        assert list(stream) == [['a', '-'], ['b', '-'], ['c', 'token']]
    assert cli.commands == [['zfs', 'list', '-H', '-p', '-o', 'name,receive_resume_token', '-r', 'a']]
    assert cli.procs[0].returncode == 0


def test_empty_output():
    cli = FakeZfsCli(FakeResponse())
    with cli.list_stream(PROPS) as stream:
        assert list(stream) == []


def test_wrong_field_count_ends_stream():
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\nb\nc\t-\n'))
    with cli.list_stream(PROPS) as stream:
        rows = iter(stream)
        assert next(rows) == ['a', '-']
        with pytest.raises(ZfsOutputError):
            next(rows)
        assert list(rows) == []


def test_nonzero_exit_is_last_item():
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\n', stderr=b'permission denied\n', returncode=1))
    received = []
    with cli.list_stream(PROPS) as stream:
        with pytest.raises(ZfsError) as exc_info:
            for row in stream:
                received.append(row)
    assert received == [['a', '-']]
    assert exc_info.value.stderr == b'permission denied\n'


def test_spawn_failure_is_delivered():
    cli = LocalZfsCli(zfs_binary='/nonexistent/zfsrepl-test/zfs')
    with cli.list_stream(PROPS) as stream:
        with pytest.raises(OSError):
            list(stream)


def test_invalid_utf8_is_delivered():
    cli = FakeZfsCli(FakeResponse(stdout=b'\xff\xfe\t-\n'))
    with cli.list_stream(PROPS) as stream:
        with pytest.raises(ZfsOutputError) as exc_info:
            list(stream)
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_not_restartable():
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\n'))
    with cli.list_stream(PROPS) as stream:
        assert list(stream) == [['a', '-']]
        with pytest.raises(RuntimeError):
            iter(stream)


def test_cancel_stops_delivery_and_terminates():
    cancel = threading.Event()
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\nb\t-\n', sleep=60))
    stream = cli.list_stream(PROPS, cancel=cancel)
    rows = iter(stream)
    assert next(rows) == ['a', '-']

    cancel.set()
    assert list(rows) == []

    closer = threading.Thread(target=stream.close)
    closer.start()
    closer.join(timeout=10)
    assert not closer.is_alive()
    assert cli.procs[0].returncode is not None


def test_close_undrained_stream_reaps_process():
    cli = FakeZfsCli(FakeResponse(stdout=b''.join(b'fs%d\t-\n' % i for i in range(100)), sleep=60))
    with cli.list_stream(PROPS) as stream:
        pass
    assert stream.cancelled
    assert cli.procs[0].returncode is not None


def test_undrained_stream_blocks_producer():
    cli = FakeZfsCli(FakeResponse(stdout=b'a\t-\nb\t-\nc\t-\n', sleep=60))
    stream = cli.list_stream(PROPS, maxsize=1)
    try:
        # nobody takes the rows, so zfs is never reaped
        stream._thread.join(timeout=0.5)
        assert stream._thread.is_alive()
        assert cli.procs[0].poll() is None
    finally:
        stream.close()
    assert cli.procs[0].returncode is not None
