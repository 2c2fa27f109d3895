"""Shared fixtures for CLI tests."""

import pytest
from git import Repo

STATUS = """# Demo

**Version:** 0.1

## Backlog
- 🔵 Write docs
    See https://example.com/docs
- 🔴 Fix CI

## Active
- 🟡 Parser
- 🟢 Setup
"""

CHECKBOX_STATUS = "# Todo\n\n## Tasks\n- [ ] Buy milk\n- [x] Walk dog\n"


@pytest.fixture
def status_dir(tmp_path):
    """A plain directory with a full-mode STATUS.md (2 lanes, 4 cards)."""
    (tmp_path / "STATUS.md").write_text(STATUS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def checkbox_dir(tmp_path):
    """A plain directory with a checkbox-only STATUS.md."""
    (tmp_path / "STATUS.md").write_text(CHECKBOX_STATUS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def committing_repo(tmp_path):
    """A git repo with STATUS.md committed and markdeck.commit enabled."""
    repo = Repo.init(tmp_path)
    (tmp_path / "STATUS.md").write_text(STATUS, encoding="utf-8")
    repo.index.add(["STATUS.md"])
    repo.index.commit("Initial commit")
    with repo.config_writer("repository") as writer:
        writer.set_value("markdeck", "commit", "true")
    return tmp_path
