"""Locate the hooks directory of the repository containing a path."""

from __future__ import annotations

import os
from pathlib import Path

from stamphook.errors import MalformedGitDirFile, NotAGitRepository
from stamphook.logging import get_logger

__all__ = [
    "find_admin_dir",
    "find_dotgit",
    "find_hooks_dir",
    "parse_gitdir_file",
    "resolve_dotgit_file",
]

_GITDIR_PREFIX = "gitdir:"

_logger = get_logger("git.locator")


def _normalize(raw: str) -> str:
    return raw.strip().replace("\\", "/")


def find_dotgit(start: Path) -> Path:
    """Return the nearest `.git` entry at or above start.

    Raises:
        NotAGitRepository: If the filesystem root is reached without a match.
    """
    start = Path(os.path.abspath(start))
    for directory in (start, *start.parents):
        candidate = directory / ".git"
        if candidate.is_dir() or candidate.is_file():
            _logger.debug("Found %s", candidate)
            return candidate
    raise NotAGitRepository(start)


def parse_gitdir_file(content: str, path: Path) -> str:
    """Extract the target of a `gitdir: <path>` file.

    Raises:
        MalformedGitDirFile: If content is not a single gitdir line.
    """
    line = content.strip()
    if "\n" in line or not line.startswith(_GITDIR_PREFIX):
        raise MalformedGitDirFile(path, content)
    target = _normalize(line[len(_GITDIR_PREFIX) :])
    if not target:
        raise MalformedGitDirFile(path, content)
    return target


def resolve_dotgit_file(dotgit: Path) -> Path:
    """Resolve a `.git` file to the repository's common admin directory.

    The gitdir target is relative to the directory holding the `.git` file.
    When the target contains a `commondir` file (linked worktree), it is
    followed exactly one level, relative to the target.
    """
    try:
        content = dotgit.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedGitDirFile(dotgit, str(exc)) from exc

    gitdir = Path(os.path.normpath(dotgit.parent / parse_gitdir_file(content, dotgit)))

    commondir_file = gitdir / "commondir"
    if not commondir_file.is_file():
        return gitdir

    try:
        commondir = _normalize(commondir_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedGitDirFile(commondir_file, str(exc)) from exc
    if not commondir:
        return gitdir
    _logger.debug("Following commondir %r from %s", commondir, gitdir)
    return Path(os.path.normpath(gitdir / commondir))


def find_admin_dir(start: Path) -> Path:
    """Return the repository admin directory (what `.git` ultimately names)."""
    dotgit = find_dotgit(start)
    if dotgit.is_dir():
        return dotgit
    return resolve_dotgit_file(dotgit)


def find_hooks_dir(start: Path) -> Path:
    """
    Return the hooks directory of the repository containing start.

    Args:
        start: Directory to search from, usually the project root.

    Returns:
        Absolute path of `<admin dir>/hooks`. The directory may not exist yet.

    Raises:
        NotAGitRepository: No `.git` entry up to the filesystem root.
        MalformedGitDirFile: A `.git` file does not hold `gitdir: <path>`.
    """
    return find_admin_dir(start) / "hooks"
