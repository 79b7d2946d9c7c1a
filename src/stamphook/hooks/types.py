"""Type definitions for hook configuration and installation."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import NamedTuple, TypeAlias

ToolVersion: TypeAlias = str


class _StrEnum(str, Enum):
    """String-valued enum that behaves like str at runtime."""

    def __str__(self) -> str:
        return str(self.value)


class HookEvent(_StrEnum):
    """Git hook events stamphook can install a script for."""

    PRE_COMMIT = "pre-commit"
    PRE_PUSH = "pre-push"
    POST_MERGE = "post-merge"


class InstallOutcome(_StrEnum):
    """What happened to one hook file during an install."""

    INSTALLED = "installed"
    UPDATED = "updated"
    UP_TO_DATE = "up-to-date"
    SKIPPED_FOREIGN = "skipped-foreign"

    @property
    def writes(self) -> bool:
        return self in (InstallOutcome.INSTALLED, InstallOutcome.UPDATED)


@dataclasses.dataclass(frozen=True)
class HookConfiguration:
    """Commands to run per hook event.

    Keyed by event, so each event maps to at most one script. Events whose
    command list is empty are dropped when the configuration is built.
    """

    commands: Mapping[HookEvent, tuple[str, ...]] = dataclasses.field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        kept = {
            HookEvent(event): tuple(cmds)
            for event, cmds in self.commands.items()
            if cmds
        }
        object.__setattr__(self, "commands", MappingProxyType(kept))

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.commands.items())))

    def events(self) -> Iterator[HookEvent]:
        """Iterate over non-empty events in declaration order of HookEvent."""
        for event in HookEvent:
            if event in self.commands:
                yield event

    def commands_for(self, event: HookEvent) -> tuple[str, ...]:
        return self.commands.get(event, ())

    def is_empty(self) -> bool:
        return not self.commands


class RepositoryLocation(NamedTuple):
    """Project root and the hooks directory resolved for it."""

    project_root: Path
    hooks_dir: Path


class HookScript(NamedTuple):
    """Rendered content of one hook file."""

    name: str  # File name under the hooks directory
    content: str
    version: ToolVersion


class InstallResult(NamedTuple):
    """Result of installing one hook script."""

    name: str
    path: Path
    outcome: InstallOutcome
