"""Git config and commits for markdeck."""

from pathlib import Path
from typing import Any

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

SECTION = "markdeck"

MARKDECK_DEFAULTS = {
    "file": "STATUS.md",
    "commit": False,
    "commit-message": "Update STATUS.md",
}


def _python_key(git_key: str) -> str:
    """Convert git-style key (hyphenated) to Python-style (underscored)."""
    return git_key.replace("-", "_")


def _coerce(git_key: str, raw: str):
    """Type-coerce a value using the type of its default."""
    default = MARKDECK_DEFAULTS.get(git_key)
    if isinstance(default, bool):
        return raw.lower() in ("true", "yes", "on", "1")
    return raw


def read_config(repo_path: str | Path) -> dict[str, Any]:
    """Read the [markdeck] git config section.

    Keys come back underscored, with defaults for anything unset.
    Outside a repository only the defaults are returned.
    """
    config = {_python_key(k): v for k, v in MARKDECK_DEFAULTS.items()}
    if not is_git_repo(repo_path):
        return config
    reader = _get_repo(repo_path).config_reader()
    if reader.has_section(SECTION):
        for git_k, raw in reader.items(SECTION):
            config[_python_key(git_k)] = _coerce(git_k, raw)
    return config


def _get_repo(repo_path: str | Path) -> Repo:
    return Repo(repo_path, search_parent_directories=True)


def is_git_repo(path: str | Path) -> bool:
    """Check if path is inside a git repository."""
    try:
        _get_repo(path)
        return True
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False


def repo_root(path: str | Path) -> Path | None:
    """Working tree root of the repository containing path, or None."""
    if not is_git_repo(path):
        return None
    return Path(_get_repo(path).working_tree_dir)


def commit_file(repo_path: str | Path, file_path: str | Path, message: str) -> str | None:
    """Stage one file and commit it.

    Returns the new commit hash, or None if the file had no changes.
    """
    repo = _get_repo(repo_path)
    root = Path(repo.working_tree_dir).resolve()
    relative = Path(file_path).resolve().relative_to(root)
    repo.index.add([str(relative)])
    if repo.head.is_valid() and not repo.index.diff("HEAD"):
        return None
    return repo.index.commit(message).hexsha
