"""Load and save status files.

A store hands out the document text together with a revision (a hash of
the file bytes). Passing that revision back to ``save`` makes the save
fail with StaleFileError if someone else changed the file in between.
"""

import hashlib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path

from markdeck.errors import StaleFileError, StoreError
from markdeck.git import commit_file, is_git_repo, read_config, repo_root

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Document text as loaded, plus the revision it was loaded at."""

    text: str
    revision: str


def content_revision(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FileStore:
    """A status file on the local filesystem."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.path}>"

    def load(self) -> Snapshot:
        """Read the file. Raises StoreError if it is missing or not UTF-8."""
        try:
            data = self.path.read_bytes()
        except OSError as e:
            raise StoreError(f"Cannot read {self.path}: {e.strerror or e}") from e
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StoreError(f"{self.path} is not valid UTF-8") from e
        logger.debug("loaded %s (%d bytes)", self.path, len(data))
        return Snapshot(text=text, revision=content_revision(data))

    def current_revision(self) -> str | None:
        """Revision of the file as it is on disk now, or None if missing."""
        try:
            return content_revision(self.path.read_bytes())
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cannot read {self.path}: {e.strerror or e}") from e

    def save(self, text: str, revision: str | None = None) -> str:
        """Write text and return the new revision.

        If revision is given and the file no longer matches it, nothing
        is written and StaleFileError is raised.
        """
        if revision is not None:
            current = self.current_revision()
            if current != revision:
                logger.warning("%s changed on disk since it was loaded", self.path)
                raise StaleFileError(f"{self.path} was changed by someone else; reload and try again")
        data = text.encode("utf-8")
        self._write(data)
        logger.debug("saved %s (%d bytes)", self.path, len(data))
        return content_revision(data)

    def _write(self, data: bytes) -> None:
        """Write via a temp file in the same directory, then replace."""
        tmp = None
        try:
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            if self.path.exists():
                os.chmod(tmp, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            raise StoreError(f"Cannot write {self.path}: {e.strerror or e}") from e


class GitStore(FileStore):
    """A status file inside a git working tree, committed on every save."""

    def __init__(self, path: str | Path, repo_path: str | Path, message: str = "Update STATUS.md"):
        super().__init__(path)
        self.repo_path = Path(repo_path)
        self.message = message
        self.last_commit: str | None = None

    def save(self, text: str, revision: str | None = None) -> str:
        new_revision = super().save(text, revision)
        self.last_commit = commit_file(self.repo_path, self.path, self.message)
        if self.last_commit:
            logger.info("committed %s as %s", self.path.name, self.last_commit[:7])
        return new_revision


def resolve_status_path(repo: str | Path = ".", file: str | Path | None = None) -> Path:
    """Pick the status file: an explicit path, else the configured one.

    The configured name (git config markdeck.file, default STATUS.md) is
    relative to the repository root, or to repo outside a repository.
    """
    if file:
        return Path(file).resolve()
    config = read_config(repo)
    root = repo_root(repo) or Path(repo)
    return (root / config["file"]).resolve()


def open_store(repo: str | Path = ".", file: str | Path | None = None) -> FileStore:
    """Store for the status file, committing saves when markdeck.commit is set."""
    path = resolve_status_path(repo, file)
    config = read_config(repo)
    if config["commit"] and is_git_repo(repo):
        return GitStore(path, repo, message=config["commit_message"])
    return FileStore(path)
