"""Render hook scripts and install them without clobbering foreign hooks."""

from __future__ import annotations

import os
import re
import shlex
import tempfile
from collections.abc import Iterable
from pathlib import Path

from stamphook.errors import InstallFailed
from stamphook.hooks.types import (
    HookConfiguration,
    HookEvent,
    HookScript,
    InstallOutcome,
    InstallResult,
    ToolVersion,
)
from stamphook.logging import get_logger

__all__ = [
    "MARKER_PREFIX",
    "decide",
    "find_marker_version",
    "install_configuration",
    "install_script",
    "marker_line",
    "render_script",
    "write_atomically",
]

MARKER_PREFIX = "# This hook was set by stamphook v"
HOOK_MODE = 0o755

_MARKER_RE = re.compile(re.escape(MARKER_PREFIX) + r"(\S+)")

_logger = get_logger("hooks.writer")


def marker_line(version: ToolVersion) -> str:
    """Return the marker line for version.

    Raises:
        ValueError: If version would not read back from the marker.
    """
    if not version or any(char.isspace() for char in version):
        raise ValueError(f"version cannot be stamped into a hook: {version!r}")
    return f"{MARKER_PREFIX}{version}"


def find_marker_version(content: str) -> str | None:
    """Return the version stamped in content, or None if unstamped."""
    match = _MARKER_RE.search(content)
    if match is None:
        return None
    return match.group(1)


def render_script(
    event: HookEvent, commands: Iterable[str], version: ToolVersion
) -> HookScript:
    """
    Render the script for one hook event.

    The script stops at the first failing command, which makes Git abort
    the operation the hook guards.

    Args:
        event: Hook event the script is installed for.
        commands: Shell commands, run in the given order.
        version: Tool version stamped into the marker line.

    Returns:
        HookScript named after the event.
    """
    lines = [
        "#!/bin/sh",
        "#",
        marker_line(version),
        "#",
        "",
        "set -e",
    ]
    for command in commands:
        lines.append("")
        lines.append(f"echo {shlex.quote('+' + command)}")
        lines.append(command)
    return HookScript(name=str(event), content="\n".join(lines) + "\n", version=version)


def decide(path: Path, version: ToolVersion) -> InstallOutcome:
    """Decide what installing a script stamped with version at path means.

    Raises:
        InstallFailed: If an existing file cannot be read.
    """
    if not os.path.lexists(path):
        return InstallOutcome.INSTALLED

    try:
        existing = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise InstallFailed(path, f"cannot read existing hook: {exc}") from exc

    stamped = find_marker_version(existing)
    if stamped is None:
        return InstallOutcome.SKIPPED_FOREIGN
    if stamped == version:
        return InstallOutcome.UP_TO_DATE
    _logger.debug("Hook %s was set by v%s, replacing with v%s", path, stamped, version)
    return InstallOutcome.UPDATED


def write_atomically(path: Path, content: str, mode: int = HOOK_MODE) -> None:
    """Write content to path through a temporary file and a rename.

    The temporary file lives in the destination directory, so the rename
    never crosses filesystems and readers see either the old or the new file.

    Raises:
        InstallFailed: On any filesystem error. The temporary file is removed.
    """
    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise InstallFailed(path, str(exc)) from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass


def install_script(script: HookScript, hooks_dir: Path) -> InstallResult:
    """
    Install one script into hooks_dir.

    Args:
        script: Rendered hook script.
        hooks_dir: Resolved hooks directory, created if missing.

    Returns:
        InstallResult describing what happened.

    Raises:
        InstallFailed: On any filesystem error.
    """
    path = hooks_dir / script.name
    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InstallFailed(hooks_dir, f"cannot create hooks directory: {exc}") from exc

    outcome = decide(path, script.version)
    if outcome.writes:
        write_atomically(path, script.content)

    if outcome is InstallOutcome.SKIPPED_FOREIGN:
        _logger.warning(
            "Hook already exists and was not set by stamphook, skipped: %s", path
        )
    elif outcome is InstallOutcome.UP_TO_DATE:
        _logger.debug("Hook is up to date: %s", path)
    else:
        _logger.info("Hook %s: %s", outcome, path)

    return InstallResult(name=script.name, path=path, outcome=outcome)


def install_configuration(
    config: HookConfiguration, version: ToolVersion, hooks_dir: Path
) -> list[InstallResult]:
    """Render and install the script of every non-empty event."""
    return [
        install_script(
            render_script(event, config.commands_for(event), version), hooks_dir
        )
        for event in config.events()
    ]
