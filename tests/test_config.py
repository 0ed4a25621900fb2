import dataclasses
import os

import pytest

from patchforge.config import DEFAULT_BLOCKED_PATHS, DEFAULT_MAX_FILE_SIZE, WriteContext


def test_defaults():
    ctx = WriteContext()
    assert ctx.max_file_size == DEFAULT_MAX_FILE_SIZE == 10 * 1024 * 1024
    assert ctx.allowed_extensions is None
    assert "node_modules" in ctx.blocked_paths
    assert ctx.working_directory == os.getcwd()


def test_working_directory_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert WriteContext(working_directory="sub").working_directory == str(tmp_path / "sub")


def test_from_mapping_camel_case(tmp_path):
    ctx = WriteContext.from_mapping(
        {
            "workingDirectory": str(tmp_path),
            "maxFileSize": 100,
            "allowedExtensions": [".js", ".ts"],
            "blockedPaths": ["secret"],
        }
    )
    assert ctx.working_directory == str(tmp_path)
    assert ctx.max_file_size == 100
    assert ctx.allowed_extensions == (".js", ".ts")
    assert ctx.blocked_paths == ("secret",)


def test_from_mapping_snake_case_and_defaults(tmp_path):
    ctx = WriteContext.from_mapping({"working_directory": str(tmp_path), "unknown": 1, "maxFileSize": None})
    assert ctx.working_directory == str(tmp_path)
    assert ctx.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert ctx.blocked_paths == DEFAULT_BLOCKED_PATHS


def test_from_mapping_empty():
    assert WriteContext.from_mapping(None).blocked_paths == DEFAULT_BLOCKED_PATHS


@pytest.mark.parametrize("size", [0, -1, "10"])
def test_invalid_max_file_size(size):
    with pytest.raises(ValueError, match="max_file_size"):
        WriteContext(max_file_size=size)


def test_invalid_pattern_list():
    with pytest.raises(ValueError, match="blockedPaths"):
        WriteContext.from_mapping({"blockedPaths": [1, 2]})


def test_with_overrides_returns_copy(tmp_path):
    base = WriteContext(working_directory=str(tmp_path))
    small = base.with_overrides(max_file_size=5, allowed_extensions=[".md"])
    assert small.max_file_size == 5
    assert small.allowed_extensions == (".md",)
    assert base.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert base.allowed_extensions is None


def test_frozen(tmp_path):
    ctx = WriteContext(working_directory=str(tmp_path))
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.max_file_size = 1
