"""Tests for path canonicalization"""

from unittest.mock import patch

import pytest

from tmark.errors import InvalidPathError
from tmark.paths import resolve_path


def test_absolute_directory(project_dir):
    assert resolve_path(str(project_dir)) == project_dir


def test_relative_to_given_cwd(project_dir):
    assert resolve_path("myproject", cwd=project_dir.parent) == project_dir


def test_relative_to_process_cwd(project_dir, monkeypatch):
    monkeypatch.chdir(project_dir.parent)
    assert resolve_path("myproject") == project_dir


@pytest.mark.parametrize("raw", [None, ""])
def test_empty_means_cwd(raw, project_dir, monkeypatch):
    monkeypatch.chdir(project_dir)
    assert resolve_path(raw) == project_dir


def test_dots_and_trailing_slash_collapse(project_dir):
    spelled = f"{project_dir.parent}/./myproject/../myproject/"
    assert str(resolve_path(spelled)) == str(project_dir)


def test_symlink_resolves_to_target(project_dir, tmp_path):
    link = tmp_path / "shortcut"
    link.symlink_to(project_dir, target_is_directory=True)
    assert resolve_path(str(link)) == project_dir


def test_home_expansion(project_dir, monkeypatch):
    monkeypatch.setenv("HOME", str(project_dir.parent))
    assert resolve_path("~/myproject") == project_dir


def test_missing_path(tmp_path):
    with pytest.raises(InvalidPathError, match="does not exist"):
        resolve_path(str(tmp_path / "nope"))


def test_file_is_rejected(tmp_path):
    target = tmp_path / "notes.txt"
    target.write_text("hi")
    with pytest.raises(InvalidPathError, match="Not a directory"):
        resolve_path(str(target))


def test_unknown_user_home():
    with pytest.raises(InvalidPathError):
        resolve_path("~no_such_user_zz/dir")


def test_symlink_loop(tmp_path):
    (tmp_path / "a").symlink_to(tmp_path / "b")
    (tmp_path / "b").symlink_to(tmp_path / "a")
    with pytest.raises(InvalidPathError):
        resolve_path(str(tmp_path / "a"))


def test_nul_byte(tmp_path):
    with pytest.raises(InvalidPathError):
        resolve_path(f"{tmp_path}/bad\x00name")


def test_non_string_value():
    with pytest.raises(InvalidPathError):
        resolve_path(5)


def test_deleted_working_directory():
    with patch("tmark.paths.Path.cwd", side_effect=FileNotFoundError("gone")):
        with pytest.raises(InvalidPathError):
            resolve_path("")
