import os
import stat

import pytest

from analyzerepo.output import write_to_file


@pytest.mark.parametrize(
    "parts, data",
    [
        (("test.txt",), b"test data"),
        (("nested", "dir", "test.txt"), b"nested test data"),
        (("empty.txt",), b""),
    ],
)
def test_write_to_file(tmp_path, parts, data):
    target = tmp_path.joinpath(*parts)
    write_to_file(target, data)
    assert target.read_bytes() == data


def test_write_to_file_accepts_text(tmp_path):
    target = tmp_path / "out.yaml"
    write_to_file(str(target), "repository: {}\n")
    assert target.read_text(encoding="utf-8") == "repository: {}\n"


def test_write_to_file_overwrites(tmp_path):
    target = tmp_path / "out.txt"
    write_to_file(target, b"first version")
    write_to_file(target, b"second")
    assert target.read_bytes() == b"second"


def test_write_to_file_permissions(tmp_path):
    old_mask = os.umask(0o022)
    try:
        target = tmp_path / "perm_test.txt"
        write_to_file(target, b"permission test")
    finally:
        os.umask(old_mask)
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_write_to_file_parent_is_a_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(OSError, match="failed to create directory"):
        write_to_file(blocker / "inner" / "file.txt", b"data")