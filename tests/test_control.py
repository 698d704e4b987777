"""Tests for sshmux.domain.mux.control - control directory and socket path."""

import os
import stat

import pytest

from sshmux.core.constants import DEFAULT_CONTROL_DIR
from sshmux.core.exceptions import ControlDirError
from sshmux.domain.mux.control import (
    control_directory,
    control_socket_path,
    ensure_control_directory,
)


class TestControlDirectory:
    def test_default(self):
        assert control_directory() == os.path.expanduser(DEFAULT_CONTROL_DIR)

    def test_empty_override_uses_default(self):
        assert control_directory("") == os.path.expanduser(DEFAULT_CONTROL_DIR)

    def test_override(self):
        assert control_directory("/custom/dir") == "/custom/dir"


class TestControlSocketPath:
    def test_template(self):
        assert control_socket_path("/tmp/ctl") == "/tmp/ctl/%C"

    def test_joins_directory(self):
        directory = control_directory("/custom/dir")
        assert control_socket_path(directory) == os.path.join(directory, "%C")


class TestEnsureControlDirectory:
    def test_creates_with_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "ctl"
        ensure_control_directory(str(target))
        assert target.is_dir()

    def test_private_permissions(self, tmp_path):
        target = tmp_path / "ctl"
        ensure_control_directory(str(target))
        mode = stat.S_IMODE(target.stat().st_mode)
        assert mode & 0o077 == 0

    def test_idempotent(self, tmp_path):
        target = tmp_path / "ctl"
        ensure_control_directory(str(target))
        ensure_control_directory(str(target))
        assert target.is_dir()

    def test_file_in_the_way(self, tmp_path):
        blocker = tmp_path / "ctl"
        blocker.write_text("not a directory")
        with pytest.raises(ControlDirError, match="Cannot create control directory"):
            ensure_control_directory(str(blocker))
