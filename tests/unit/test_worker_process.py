"""Unit tests for worker process helpers."""

import signal

import pytest

from nel.worker import process
from nel.worker.process import SERVER_PATH, exit_status, node_executable


@pytest.mark.unit
class TestExitStatus:
    def test_normal_exit(self):
        assert exit_status(0) == (0, None)
        assert exit_status(3) == (3, None)

    def test_killed_by_signal(self):
        assert exit_status(-signal.SIGTERM) == (None, signal.SIGTERM)
        assert exit_status(-signal.SIGKILL) == (None, signal.SIGKILL)

    def test_still_running(self):
        assert exit_status(None) == (None, None)


@pytest.mark.unit
def test_node_executable_missing(monkeypatch):
    monkeypatch.setattr(process.shutil, "which", lambda name: None)
    with pytest.raises(FileNotFoundError):
        node_executable()


@pytest.mark.unit
def test_node_executable_found(monkeypatch):
    monkeypatch.setattr(
        process.shutil, "which", lambda name: "/usr/bin/node" if name == "node" else None
    )
    assert node_executable() == "/usr/bin/node"


@pytest.mark.unit
def test_server_is_bundled():
    assert SERVER_PATH.name == "server.js"
    assert SERVER_PATH.is_file()
