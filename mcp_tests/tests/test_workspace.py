import os

import pytest

from core.errors import NotFoundError
from core.workspace import WorkspaceContext, is_contained, is_within_root


def test_within_root_is_separator_aware(tmp_path):
    root = tmp_path / "a" / "b"
    root.mkdir(parents=True)
    (tmp_path / "a" / "bc").mkdir()

    assert is_within_root(root, root)
    assert is_within_root(root / "c" / "d.txt", root)
    assert not is_within_root(tmp_path / "a" / "bc" / "x.txt", root)
    assert not is_within_root(tmp_path / "a", root)


def test_within_root_normalizes_dot_dot(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    assert not is_within_root(str(root) + "/../outside.txt", root)
    assert is_within_root(str(root) + "/sub/../inside.txt", root)


def test_is_contained_any_root(tmp_path):
    r1 = tmp_path / "one"
    r2 = tmp_path / "two"
    r1.mkdir()
    r2.mkdir()
    assert is_contained(r2 / "f.txt", [r1, r2])
    assert not is_contained(tmp_path / "three" / "f.txt", [r1, r2])


def test_symlink_escape_is_not_within_workspace(tmp_path):
    ws = tmp_path / "ws"
    ws.mkdir()
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("s", encoding="utf-8")

    link = ws / "link.txt"
    try:
        os.symlink(outside / "secret.txt", link)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    ctx = WorkspaceContext(ws)
    assert not ctx.is_path_within_workspace(link)


def test_workspace_context_directories(tmp_path):
    ws = tmp_path / "ws"
    extra = tmp_path / "extra"
    ws.mkdir()
    extra.mkdir()

    ctx = WorkspaceContext(ws, [extra, ws])
    assert ctx.target_dir == str(ws.resolve())
    assert ctx.get_directories() == [str(ws.resolve()), str(extra.resolve())]


def test_workspace_context_missing_directory(tmp_path):
    with pytest.raises(NotFoundError):
        WorkspaceContext(tmp_path, [tmp_path / "missing"])
