"""Tests for status file stores."""

import os
import stat

import pytest
from git import Repo

from markdeck.errors import StaleFileError, StoreError
from markdeck.store import FileStore, GitStore, content_revision, open_store, resolve_status_path


@pytest.fixture
def status_file(tmp_path):
    path = tmp_path / "STATUS.md"
    path.write_text("# P\n## L\n- 🔵 A\n", encoding="utf-8")
    return path


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository with a committed STATUS.md."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    (repo_path / "STATUS.md").write_text("# P\n", encoding="utf-8")
    repo.index.add(["STATUS.md"])
    repo.index.commit("Initial commit")
    return repo_path


def _set_config(repo_path, **values):
    with Repo(repo_path).config_writer("repository") as writer:
        for key, value in values.items():
            writer.set_value("markdeck", key, value)


def test_load(status_file):
    snapshot = FileStore(status_file).load()
    assert snapshot.text == "# P\n## L\n- 🔵 A\n"
    assert snapshot.revision == content_revision(status_file.read_bytes())


def test_load_missing(tmp_path):
    with pytest.raises(StoreError, match="Cannot read"):
        FileStore(tmp_path / "nope.md").load()


def test_load_not_utf8(tmp_path):
    path = tmp_path / "STATUS.md"
    path.write_bytes(b"\xff\xfe bad")
    with pytest.raises(StoreError, match="UTF-8"):
        FileStore(path).load()


def test_save_returns_new_revision(status_file):
    store = FileStore(status_file)
    snapshot = store.load()
    revision = store.save("# Q\n", snapshot.revision)
    assert status_file.read_text(encoding="utf-8") == "# Q\n"
    assert revision == store.current_revision()
    assert revision != snapshot.revision


def test_save_stale(status_file):
    store = FileStore(status_file)
    snapshot = store.load()
    status_file.write_text("# Changed elsewhere\n", encoding="utf-8")
    with pytest.raises(StaleFileError):
        store.save("# Mine\n", snapshot.revision)
    assert status_file.read_text(encoding="utf-8") == "# Changed elsewhere\n"


def test_stale_is_store_error(status_file):
    store = FileStore(status_file)
    with pytest.raises(StoreError):
        store.save("x", "not-a-revision")


def test_save_without_revision_overwrites(status_file):
    store = FileStore(status_file)
    status_file.write_text("# Changed elsewhere\n", encoding="utf-8")
    store.save("# Mine\n")
    assert status_file.read_text(encoding="utf-8") == "# Mine\n"


def test_save_creates_file(tmp_path):
    path = tmp_path / "NEW.md"
    FileStore(path).save("# New\n")
    assert path.read_text(encoding="utf-8") == "# New\n"


def test_save_keeps_mode(status_file):
    os.chmod(status_file, 0o600)
    FileStore(status_file).save("# Q\n")
    assert stat.S_IMODE(status_file.stat().st_mode) == 0o600


def test_save_leaves_no_temp_files(status_file):
    FileStore(status_file).save("# Q\n")
    assert [p.name for p in status_file.parent.iterdir()] == ["STATUS.md"]


def test_current_revision_missing(tmp_path):
    assert FileStore(tmp_path / "nope.md").current_revision() is None


def test_resolve_explicit_file(tmp_path):
    assert resolve_status_path(tmp_path, tmp_path / "board.md") == (tmp_path / "board.md").resolve()


def test_resolve_default_outside_repo(tmp_path):
    assert resolve_status_path(tmp_path) == (tmp_path / "STATUS.md").resolve()


def test_resolve_configured_file_from_subdir(temp_repo):
    _set_config(temp_repo, file="docs/BOARD.md")
    sub = temp_repo / "src"
    sub.mkdir()
    assert resolve_status_path(sub) == (temp_repo / "docs" / "BOARD.md").resolve()


def test_open_store_plain(temp_repo):
    store = open_store(temp_repo)
    assert type(store) is FileStore


def test_open_store_commits(temp_repo):
    _set_config(temp_repo, **{"commit": "true", "commit-message": "Board update"})
    store = open_store(temp_repo)
    assert isinstance(store, GitStore)

    snapshot = store.load()
    store.save("# P\n## L\n- 🔵 A\n", snapshot.revision)
    assert store.last_commit is not None
    head = Repo(temp_repo).head.commit
    assert head.hexsha == store.last_commit
    assert head.message == "Board update"


def test_git_store_unchanged_save_does_not_commit(temp_repo):
    store = GitStore(temp_repo / "STATUS.md", temp_repo)
    store.save("# P\n")
    assert store.last_commit is None
