import logging
import os

import pytest

from imgvariant.io import fs
from imgvariant.io.fs import (
    dispose_tempfile,
    get_file_ext,
    new_tempfile,
    normalize_ext,
    silent_remove,
    temporary_file,
)


@pytest.mark.parametrize(
    "ext, expected",
    [("png", ".png"), (".png", ".png"), ("", ""), (None, ""), (" jpg ", ".jpg")],
)
def test_normalize_ext(ext, expected):
    assert normalize_ext(ext) == expected


def test_get_file_ext():
    assert get_file_ext("/photos/IMG_0748.jpeg") == ".jpeg"
    assert get_file_ext("README") == ""


def test_silent_remove_missing(tmp_path):
    silent_remove(str(tmp_path / "missing.png"))


def test_silent_remove_directory_raises(tmp_path):
    with pytest.raises(OSError):
        silent_remove(str(tmp_path))


def test_new_tempfile_is_owned_by_caller(tmp_path):
    tmp = new_tempfile("png", dir=str(tmp_path))
    try:
        tmp.write(b"data")
        tmp.close()
        assert os.path.exists(tmp.name)
    finally:
        dispose_tempfile(tmp)
    assert not os.path.exists(tmp.name)


def test_dispose_twice(tmp_path):
    tmp = new_tempfile(dir=str(tmp_path))
    dispose_tempfile(tmp)
    dispose_tempfile(tmp)
    assert list(tmp_path.iterdir()) == []


def test_dispose_suppressed_failure_is_logged(tmp_path, monkeypatch, caplog):
    def fail(file_path):
        raise PermissionError(13, "Permission denied", file_path)

    tmp = new_tempfile(dir=str(tmp_path))
    monkeypatch.setattr(fs, "silent_remove", fail)
    with caplog.at_level(logging.WARNING, logger="imgvariant.io.fs"):
        dispose_tempfile(tmp, suppress=True)
    assert tmp.closed
    assert "Failed to remove temp file" in caplog.text

    with pytest.raises(PermissionError):
        dispose_tempfile(tmp)


def test_temporary_file(tmp_path):
    with temporary_file("gif", prefix="scratch_", dir=str(tmp_path)) as tmp:
        path = tmp.name
        assert os.path.basename(path).startswith("scratch_")
        assert path.endswith(".gif")
    assert not os.path.exists(path)


def test_temporary_file_on_error(tmp_path):
    with pytest.raises(ValueError):
        with temporary_file(dir=str(tmp_path)) as tmp:
            raise ValueError("boom")
    assert list(tmp_path.iterdir()) == []
