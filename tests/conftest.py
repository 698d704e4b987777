"""
Shared pytest fixtures for sshmux unit tests.

Fake transport binaries are small shell scripts that record their argv and
stdin, then exit with a chosen status, so no network or real ssh is needed.
"""
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pytest

from sshmux.core.telemetry import Telemetry


@dataclass
class FakeBinary:
    """A scripted stand-in for ssh or sftp"""
    path: Path
    args_file: Path
    stdin_file: Path

    @property
    def calls(self) -> List[List[str]]:
        """argv (without argv[0]) of every invocation, oldest first"""
        if not self.args_file.exists():
            return []
        blocks = self.args_file.read_text().split("\x1e\n")
        return [block.splitlines() for block in blocks[:-1]]

    @property
    def last_args(self) -> List[str]:
        return self.calls[-1]

    @property
    def stdin(self) -> str:
        return self.stdin_file.read_text() if self.stdin_file.exists() else ""


@pytest.fixture
def make_binary(tmp_path):
    """Factory creating executable fake binaries under tmp_path/bin"""
    if sys.platform == "win32":
        pytest.skip("fake binaries are POSIX shell scripts")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(
        name: str = "ssh",
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
        sleep: Optional[float] = None,
    ) -> FakeBinary:
        path = bin_dir / name
        args_file = tmp_path / f"{name}.args"
        stdin_file = tmp_path / f"{name}.stdin"
        lines = [
            "#!/bin/sh",
            f"for a in \"$@\"; do printf '%s\\n' \"$a\"; done >> '{args_file}'",
            f"printf '\\036\\n' >> '{args_file}'",
            f"cat > '{stdin_file}'",
        ]
        if stdout:
            lines.append(f"printf '%s' '{stdout}'")
        if stderr:
            lines.append(f"printf '%s' '{stderr}' >&2")
        if sleep is not None:
            lines.append(f"exec sleep {sleep}")
        lines.append(f"exit {exit_code}")
        path.write_text("\n".join(lines) + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return FakeBinary(path=path, args_file=args_file, stdin_file=stdin_file)

    return _make


@pytest.fixture
def telemetry():
    """Fresh telemetry collector isolated from the global one"""
    return Telemetry()


@pytest.fixture
def control_dir(tmp_path):
    """Not-yet-existing control directory"""
    return str(tmp_path / "ctl")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SSHMUX_* variables inherited from the developer's shell"""
    for key in list(os.environ):
        if key.startswith("SSHMUX_"):
            monkeypatch.delenv(key)
    return monkeypatch

