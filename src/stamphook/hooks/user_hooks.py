"""Hook scripts provided by the project under `.stamphook/hooks/`."""

from __future__ import annotations

import os
from pathlib import Path

from stamphook.errors import UserHooksError
from stamphook.hooks.types import HookScript, ToolVersion
from stamphook.hooks.writer import marker_line

USER_HOOKS_DIR = Path(".stamphook") / "hooks"

_NOT_FOUND = (
    "User hooks directory is not found or no executable file is found "
    "in the directory"
)


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_user_hooks(project_root: Path) -> list[Path]:
    """Return the executable files in the project's user hooks directory.

    Raises:
        UserHooksError: If the directory is missing or holds no executable.
    """
    hooks_dir = project_root / USER_HOOKS_DIR
    if not hooks_dir.is_dir():
        raise UserHooksError(f"{_NOT_FOUND}: {hooks_dir}")
    found = sorted(p for p in hooks_dir.iterdir() if _is_executable(p))
    if not found:
        raise UserHooksError(f"{_NOT_FOUND}: {hooks_dir}")
    return found


def stamp_user_script(content: str, version: ToolVersion) -> str:
    """Insert the marker so it is always the third line of the script.

    A shebang stays on the first line; without one, a `#` line takes its
    place.
    """
    lines = content.splitlines()
    if lines and lines[0].startswith("#!"):
        head = lines.pop(0)
    else:
        head = "#"
    stamped = [head, "#", marker_line(version), *lines]
    return "\n".join(stamped) + "\n"


def render_user_hook(source: Path, version: ToolVersion) -> HookScript:
    """Read a user hook and stamp it for installation under the same name.

    Raises:
        UserHooksError: If the script is empty or unreadable.
    """
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise UserHooksError(f"Cannot read user hook script {source}: {exc}") from exc
    if not content:
        raise UserHooksError(f"User hook script is empty: {source}")
    return HookScript(
        name=source.name,
        content=stamp_user_script(content, version),
        version=version,
    )


def render_user_hooks(project_root: Path, version: ToolVersion) -> list[HookScript]:
    return [render_user_hook(path, version) for path in find_user_hooks(project_root)]
