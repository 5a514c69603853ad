from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from container_installer.core.exceptions import PersistenceReadError, PersistenceWriteError
from container_installer.core.factories import ContainersFile, open_containers_file
from container_installer.core.utils.io import acquire_file_lock, is_locked

MODULE = "CONTAINERS = [{'name': 'a', 'factory': f, 'enable': False}]\n"


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    with open_containers_file(tmp_path / "containers.py") as store:
        assert store.read() == []


def test_read_returns_previous_entries(tmp_path: Path) -> None:
    target = tmp_path / "containers.py"
    target.write_text(MODULE, encoding="utf-8")

    with open_containers_file(target) as store:
        (entry,) = store.read()

    assert entry["name"] == "a"
    assert entry["enable"] is False


def test_corrupt_file_reads_as_empty_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    target = tmp_path / "containers.py"
    target.write_text("CONTAINERS = [{'name': ", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="container_installer"):
        with open_containers_file(target) as store:
            assert store.read() == []
            with pytest.raises(PersistenceReadError):
                store.read_strict()

    assert "regenerating without previous entries" in caplog.text


def test_write_replaces_file_and_holds_lock_meanwhile(tmp_path: Path) -> None:
    target = tmp_path / "containers.py"
    target.write_text("old\n", encoding="utf-8")

    with open_containers_file(target) as store:
        assert is_locked(target)
        store.write(MODULE)

    assert target.read_text(encoding="utf-8") == MODULE
    assert not is_locked(target)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["containers.py"]


def test_second_write_is_refused(tmp_path: Path) -> None:
    with open_containers_file(tmp_path / "containers.py") as store:
        store.write(MODULE)
        with pytest.raises(RuntimeError):
            store.write(MODULE)


def test_failed_write_leaves_previous_file_untouched(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "containers.py"
    target.write_text(MODULE, encoding="utf-8")

    def _boom(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", _boom)

    with open_containers_file(target) as store:
        with pytest.raises(PersistenceWriteError) as excinfo:
            store.write("CONTAINERS = []\n")

    assert excinfo.value.context["stage"] == "persist"
    assert target.read_text(encoding="utf-8") == MODULE
    assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []


def test_lock_timeout_is_reported_as_write_failure(tmp_path: Path) -> None:
    target = tmp_path / "containers.py"

    with acquire_file_lock(target, timeout=1):
        with pytest.raises(PersistenceWriteError):
            with open_containers_file(target, timeout=0.1, poll_interval=0.01):
                pytest.fail("lock should not be acquired")


def test_handle_uses_configured_variable(tmp_path: Path) -> None:
    target = tmp_path / "containers.py"
    target.write_text("FACTORIES = [{'name': 'x', 'factory': y}]\n", encoding="utf-8")

    assert [e["name"] for e in ContainersFile(target, variable="FACTORIES").read()] == ["x"]
