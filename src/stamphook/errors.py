"""Exception types raised by the hook installer."""

from __future__ import annotations

from pathlib import Path


class StamphookError(Exception):
    """Base class for all stamphook errors."""


class NotAGitRepository(StamphookError):
    """No `.git` entry was found from the start directory up to the root."""

    def __init__(self, start: Path) -> None:
        self.start = start
        super().__init__(f"not a git repository (or any parent up to /): {start}")


class MalformedGitDirFile(NotAGitRepository):
    """A `.git` file exists but does not hold a `gitdir: <path>` line."""

    def __init__(self, path: Path, content: str) -> None:
        self.path = path
        self.content = content
        StamphookError.__init__(
            self,
            f"invalid gitdir file {path}: expected 'gitdir: <path>', got {content!r}",
        )
        self.start = path.parent


class InstallFailed(StamphookError):
    """A filesystem operation needed to install a hook failed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"failed to install hook {path}: {reason}")


class ConfigurationError(StamphookError):
    """The feature set, settings file or user hooks are misconfigured."""


class UnknownFeatureError(ConfigurationError):
    def __init__(self, name: str, known: tuple[str, ...]) -> None:
        self.name = name
        super().__init__(
            f"unknown feature {name!r} (expected one of: {', '.join(known)})"
        )


class SettingsError(ConfigurationError):
    pass


class UserHooksError(ConfigurationError):
    pass
