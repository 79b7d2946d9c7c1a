"""Hook configuration, rendering and installation."""

from stamphook.hooks.features import Features, resolve_configuration
from stamphook.hooks.types import (
    HookConfiguration,
    HookEvent,
    HookScript,
    InstallOutcome,
    InstallResult,
    RepositoryLocation,
)
from stamphook.hooks.writer import install_configuration, install_script, render_script

__all__ = [
    "Features",
    "HookConfiguration",
    "HookEvent",
    "HookScript",
    "InstallOutcome",
    "InstallResult",
    "RepositoryLocation",
    "install_configuration",
    "install_script",
    "render_script",
    "resolve_configuration",
]
