"""Install the hooks a project's features ask for."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from stamphook.error_handling import tolerate
from stamphook.errors import NotAGitRepository
from stamphook.git.locator import find_hooks_dir
from stamphook.hooks.features import Features, resolve_configuration
from stamphook.hooks.types import (
    HookScript,
    InstallResult,
    RepositoryLocation,
    ToolVersion,
)
from stamphook.hooks.user_hooks import render_user_hooks
from stamphook.hooks.writer import install_script, render_script
from stamphook.logging import get_logger
from stamphook.settings import resolve_settings

__all__ = [
    "install_hooks",
    "locate_repository",
    "render_hooks",
    "run_from_environment",
]

_logger = get_logger("installer")


def locate_repository(project_root: Path) -> RepositoryLocation:
    """Resolve where hooks for project_root go.

    Raises:
        NotAGitRepository: If project_root is not inside a repository.
    """
    return RepositoryLocation(
        project_root=project_root, hooks_dir=find_hooks_dir(project_root)
    )


def render_hooks(
    project_root: Path, version: ToolVersion, features: Features
) -> list[HookScript]:
    """Render every script the features ask for, without touching Git.

    With user hooks enabled, the built-in events and commands are ignored.
    """
    if features.user_hooks:
        return render_user_hooks(project_root, version)

    config = resolve_configuration(features)
    if config.is_empty():
        _logger.info("No hook event enabled, nothing to install")
    return [
        render_script(event, config.commands_for(event), version)
        for event in config.events()
    ]


@tolerate(
    NotAGitRepository,
    logger=_logger,
    operation="hook installation",
    default_factory=list,
)
def install_hooks(
    project_root: Path, version: ToolVersion, features: Features
) -> list[InstallResult]:
    """
    Install the hooks for project_root.

    Args:
        project_root: Root directory of the project.
        version: Tool version stamped into every script.
        features: Enabled feature flags.

    Returns:
        One InstallResult per script; empty when no repository was found.

    Raises:
        InstallFailed: On any filesystem error while writing.
        ConfigurationError: If user hooks are enabled but unusable.
    """
    location = locate_repository(project_root)
    _logger.debug("Hooks directory: %s", location.hooks_dir)

    scripts = render_hooks(location.project_root, version, features)
    return [install_script(script, location.hooks_dir) for script in scripts]


def run_from_environment(
    environ: Mapping[str, str] | None = None,
) -> list[InstallResult]:
    """Install hooks using only the environment and the settings file.

    This is what a build step calls: the project root, tool version and
    features come from STAMPHOOK_* variables and `.stamphook.yaml`.
    """
    settings = resolve_settings(environ=environ)
    _logger.debug("Settings: %s", settings)
    return install_hooks(settings.project_root, settings.version, settings.features)
