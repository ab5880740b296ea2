from __future__ import annotations

from pathlib import Path

import pytest

from lecturesnap.models.exceptions import MoveError
from lecturesnap.routing.access import AccessGrantManager, find_source_root, folder_access


def test_grants_released_on_success(tmp_path: Path) -> None:
    manager = AccessGrantManager()
    with folder_access(tmp_path, manager=manager) as keys:
        assert manager.is_granted(tmp_path)
        assert len(keys) == 1
    assert manager.active() == {}


def test_grants_released_on_error(tmp_path: Path) -> None:
    manager = AccessGrantManager()
    other = tmp_path / "other"
    other.mkdir()
    with pytest.raises(ValueError):
        with folder_access(tmp_path, other, manager=manager):
            raise ValueError("boom")
    assert manager.active() == {}


def test_missing_folder_releases_earlier_grants(tmp_path: Path) -> None:
    manager = AccessGrantManager()
    with pytest.raises(MoveError):
        with folder_access(tmp_path, tmp_path / "missing", manager=manager):
            pass
    assert manager.active() == {}


def test_nested_grants_are_counted(tmp_path: Path) -> None:
    manager = AccessGrantManager()
    with folder_access(tmp_path, manager=manager):
        with folder_access(tmp_path, manager=manager):
            assert list(manager.active().values()) == [2]
        assert list(manager.active().values()) == [1]
    assert manager.active() == {}


def test_find_source_root(tmp_path: Path) -> None:
    inbox = tmp_path / "a" / "b"
    (inbox / "sub").mkdir(parents=True)
    sibling = tmp_path / "a" / "bc"
    sibling.mkdir()

    assert find_source_root(inbox / "x.pdf", [inbox]) == inbox
    assert find_source_root(inbox / "sub" / "x.pdf", [inbox]) == inbox
    assert find_source_root(sibling / "x.pdf", [inbox]) is None
    assert find_source_root(inbox, [inbox]) is None
    assert find_source_root(inbox / "x.pdf", [sibling, inbox]) == inbox
