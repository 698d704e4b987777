"""Tests for sshmux.domain.mux.locator - PATH lookup and caching."""

import threading

from sshmux.domain.mux.locator import BinaryLocator


class TestBinaryLocator:
    def test_found_on_path(self, make_binary, monkeypatch):
        fake = make_binary("ssh")
        monkeypatch.setenv("PATH", str(fake.path.parent))
        locator = BinaryLocator("ssh")
        assert locator.locate() is True
        assert locator.cached == str(fake.path)
        assert locator.path == str(fake.path)

    def test_not_found(self, monkeypatch):
        monkeypatch.setenv("PATH", "/nonexistent")
        locator = BinaryLocator("ssh")
        assert locator.locate() is False
        assert locator.cached == ""

    def test_bare_name_fallback(self, monkeypatch):
        monkeypatch.setenv("PATH", "/nonexistent")
        locator = BinaryLocator("ssh")
        locator.locate()
        assert locator.path == "ssh"

    def test_explicit_path_is_authoritative(self, monkeypatch):
        monkeypatch.setenv("PATH", "/nonexistent")
        locator = BinaryLocator("ssh", "/usr/bin/ssh")
        assert locator.locate() is True
        assert locator.path == "/usr/bin/ssh"

    def test_cache_survives_path_change(self, make_binary, monkeypatch):
        fake = make_binary("ssh")
        monkeypatch.setenv("PATH", str(fake.path.parent))
        locator = BinaryLocator("ssh")
        locator.locate()
        monkeypatch.setenv("PATH", "/nonexistent")
        assert locator.locate() is True
        assert locator.path == str(fake.path)

    def test_rescans_until_found(self, make_binary, monkeypatch):
        monkeypatch.setenv("PATH", "/nonexistent")
        locator = BinaryLocator("ssh")
        assert locator.locate() is False
        fake = make_binary("ssh")
        monkeypatch.setenv("PATH", str(fake.path.parent))
        assert locator.locate() is True
        assert locator.cached == str(fake.path)

    def test_concurrent_first_use(self, make_binary, monkeypatch):
        fake = make_binary("ssh")
        monkeypatch.setenv("PATH", str(fake.path.parent))
        locator = BinaryLocator("ssh")
        results = []

        def worker():
            results.append(locator.locate())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [True] * 8
        assert locator.cached == str(fake.path)
