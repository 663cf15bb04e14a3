from __future__ import annotations
from dataclasses import dataclass
from subprocess import Popen
from typing import Optional
import sys
import textwrap

from zfsrepl.common.zfs import ZfsCli


# stands in for the zfs binary: optionally stores stdin in a file, prints the given output and exits
_SCRIPT = textwrap.dedent('''
    import sys, time
    stdin_path, stdout, stderr = sys.argv[1], bytes.fromhex(sys.argv[2]), bytes.fromhex(sys.argv[3])
    sleep, code = float(sys.argv[4]), int(sys.argv[5])
    if stdin_path:
        data = sys.stdin.buffer.read()
        with open(stdin_path, 'wb') as f:
            f.write(data)
    sys.stdout.buffer.write(stdout)
    sys.stdout.buffer.flush()
    sys.stderr.buffer.write(stderr)
    sys.stderr.buffer.flush()
    time.sleep(sleep)
    sys.exit(code)
''')


@dataclass
class FakeResponse:
    stdout: bytes = b''
    stderr: bytes = b''
    returncode: int = 0
    sleep: float = 0
    stdin_path: Optional[str] = None


class FakeZfsCli(ZfsCli):
    """Answers each zfs invocation with the next response, in order, and records the commands."""

    def __init__(self, *responses: FakeResponse) -> None:
        super().__init__(zfs_binary='zfs')
        self.responses = list(responses)
        self.commands: list[list[str]] = []
        self.procs: list[Popen[bytes]] = []

    def _start_command(self, cmd: list[str], stdin=None, stdout=None, stderr=None) -> Popen[bytes]:
        self.commands.append(cmd)
        if not self.responses:
            raise AssertionError(f"Unexpected zfs invocation: {cmd}")
        r = self.responses.pop(0)
        p = Popen(
            [sys.executable, '-c', _SCRIPT, r.stdin_path or '', r.stdout.hex(), r.stderr.hex(), str(r.sleep), str(r.returncode)],
            stdin=stdin, stdout=stdout, stderr=stderr
        )
        self.procs.append(p)
        return p
