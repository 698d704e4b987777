"""Tests for sshmux.infrastructure.process.runner - subprocess execution."""

import os
import subprocess
import sys
import threading
import time

import pytest

from sshmux.infrastructure.process import ProcessCancelled, run_process


class TestRunProcess:
    def test_captures_output(self, make_binary):
        fake = make_binary("tool", exit_code=3, stdout="hello", stderr="oops")
        result = run_process([str(fake.path), "a", "b c"])
        assert result.returncode == 3
        assert not result.ok
        assert result.stdout == "hello"
        assert result.stderr == "oops"
        assert fake.last_args == ["a", "b c"]

    def test_feeds_input(self, make_binary):
        fake = make_binary("tool")
        run_process([str(fake.path)], input="put a b\n")
        assert fake.stdin == "put a b\n"

    def test_stdin_is_empty_without_input(self, make_binary):
        fake = make_binary("tool")
        run_process([str(fake.path)])
        assert fake.stdin == ""

    def test_missing_binary(self):
        with pytest.raises(FileNotFoundError):
            run_process(["/nonexistent/ssh"])

    def test_timeout_kills(self, make_binary):
        fake = make_binary("tool", sleep=30)
        start = time.monotonic()
        with pytest.raises(subprocess.TimeoutExpired):
            run_process([str(fake.path)], timeout=0.3)
        assert time.monotonic() - start < 10

    def test_cancel_kills(self, make_binary):
        fake = make_binary("tool", sleep=30)
        cancel = threading.Event()
        timer = threading.Timer(0.3, cancel.set)
        timer.start()
        start = time.monotonic()
        try:
            with pytest.raises(ProcessCancelled):
                run_process([str(fake.path)], cancel=cancel)
        finally:
            timer.cancel()
        assert time.monotonic() - start < 10

    def test_already_cancelled(self, make_binary):
        fake = make_binary("tool", sleep=30)
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(ProcessCancelled) as exc_info:
            run_process([str(fake.path)], cancel=cancel)
        assert exc_info.value.argv == [str(fake.path)]


class _InterruptOnceStarted:
    """Cancel stand-in that raises KeyboardInterrupt once the child has written its pid"""

    def __init__(self, pid_file):
        self.pid_file = pid_file

    def is_set(self):
        if self.pid_file.exists() and self.pid_file.read_text().strip():
            raise KeyboardInterrupt
        return False


class TestNoLeakedChild:
    def test_interrupt_kills_child(self, tmp_path):
        if sys.platform == "win32":
            pytest.skip("POSIX shell script")
        pid_file = tmp_path / "child.pid"
        script = tmp_path / "slow"
        script.write_text(f"#!/bin/sh\necho $$ > '{pid_file}'\nexec sleep 30\n")
        script.chmod(0o755)

        with pytest.raises(KeyboardInterrupt):
            run_process([str(script)], timeout=20, cancel=_InterruptOnceStarted(pid_file))

        pid = int(pid_file.read_text())
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    def test_timeout_reaps_child(self, tmp_path):
        if sys.platform == "win32":
            pytest.skip("POSIX shell script")
        pid_file = tmp_path / "child.pid"
        script = tmp_path / "slow"
        script.write_text(f"#!/bin/sh\necho $$ > '{pid_file}'\nexec sleep 30\n")
        script.chmod(0o755)

        with pytest.raises(subprocess.TimeoutExpired):
            run_process([str(script)], timeout=0.5)

        if pid_file.exists():
            with pytest.raises(ProcessLookupError):
                os.kill(int(pid_file.read_text()), 0)
