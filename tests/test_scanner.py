"""Tests for component folder discovery."""

import pytest

from flexpages.scanner import list_component_dirs


def test_lists_immediate_subdirectories_sorted(tmp_path):
    for name in ("Quote", "Banner", "GenericContent"):
        (tmp_path / name / "nested").mkdir(parents=True)
    (tmp_path / "README.md").write_text("not a component")

    assert list_component_dirs(tmp_path) == ["Banner", "GenericContent", "Quote"]


def test_skips_hidden_directories(tmp_path):
    (tmp_path / ".git").mkdir()
    (tmp_path / "Banner").mkdir()

    assert list_component_dirs(tmp_path) == ["Banner"]


def test_empty_folder_has_no_components(tmp_path):
    assert list_component_dirs(tmp_path) == []


def test_missing_folder_raises_io_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_component_dirs(tmp_path / "missing")
