"""Install settings from arguments, environment and `.stamphook.yaml`."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

import stamphook
from stamphook.errors import SettingsError
from stamphook.hooks.features import Features
from stamphook.hooks.types import ToolVersion

SETTINGS_FILE = ".stamphook.yaml"

ENV_PROJECT_ROOT = "STAMPHOOK_PROJECT_ROOT"
ENV_VERSION = "STAMPHOOK_VERSION"
ENV_FEATURES = "STAMPHOOK_FEATURES"
ENV_NO_DEFAULT_FEATURES = "STAMPHOOK_NO_DEFAULT_FEATURES"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FILE_KEYS = frozenset({"features", "default-features"})


@dataclasses.dataclass(frozen=True)
class FileSettings:
    """Contents of a project's settings file."""

    features: tuple[str, ...] = ()
    default_features: bool | None = None


@dataclasses.dataclass(frozen=True)
class Settings:
    """Fully resolved inputs of one install."""

    project_root: Path
    version: ToolVersion
    features: Features


def split_features(value: str) -> list[str]:
    """Split a comma or whitespace separated feature list."""
    return [item for item in value.replace(",", " ").split() if item]


def check_version(version: str) -> ToolVersion:
    """Strip version and reject values the hook marker cannot carry.

    Raises:
        SettingsError: If version is empty or contains whitespace.
    """
    version = version.strip()
    if not version:
        raise SettingsError("tool version must not be empty")
    if any(char.isspace() for char in version):
        raise SettingsError(f"tool version must not contain whitespace: {version!r}")
    return version


def _parse_file(data: Any, path: Path) -> FileSettings:
    if data is None:
        return FileSettings()
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: settings must be a mapping")

    unknown = sorted(str(key) for key in data if key not in _FILE_KEYS)
    if unknown:
        raise SettingsError(f"{path}: unknown keys: {', '.join(unknown)}")

    features = data.get("features")
    if features is None:
        features = []
    if not isinstance(features, list) or not all(
        isinstance(item, str) for item in features
    ):
        raise SettingsError(f"{path}: 'features' must be a list of strings")

    default_features = data.get("default-features")
    if default_features is not None and not isinstance(default_features, bool):
        raise SettingsError(f"{path}: 'default-features' must be true or false")

    return FileSettings(features=tuple(features), default_features=default_features)


def load_settings_file(project_root: Path) -> FileSettings:
    """
    Load `.stamphook.yaml` from the project root.

    Args:
        project_root: Directory holding the settings file.

    Returns:
        Parsed settings; empty settings when the file does not exist.

    Raises:
        SettingsError: If the file cannot be read or is not valid.
    """
    path = project_root / SETTINGS_FILE
    if not path.is_file():
        return FileSettings()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise SettingsError(f"{path}: {exc}") from exc
    return _parse_file(data, path)


def resolve_settings(
    *,
    project_root: Path | None = None,
    version: ToolVersion | None = None,
    features: Sequence[str] | None = None,
    no_default_features: bool = False,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Combine explicit arguments, environment and settings file.

    Explicit arguments win over the environment, which wins over the
    settings file. Feature names from all three are combined.

    Raises:
        SettingsError: If the settings file is invalid.
        UnknownFeatureError: If a feature name is not recognized.
    """
    env = os.environ if environ is None else environ

    if project_root is None:
        env_root = env.get(ENV_PROJECT_ROOT)
        project_root = Path(env_root) if env_root else Path.cwd()
    project_root = Path(os.path.abspath(project_root))

    if version is None:
        version = env.get(ENV_VERSION) or stamphook.__version__
    version = check_version(version)

    file_settings = load_settings_file(project_root)

    names = list(file_settings.features)
    names.extend(split_features(env.get(ENV_FEATURES, "")))
    names.extend(features or ())

    if no_default_features:
        default_features = False
    elif env.get(ENV_NO_DEFAULT_FEATURES, "").strip().lower() in _TRUE_VALUES:
        default_features = False
    elif file_settings.default_features is not None:
        default_features = file_settings.default_features
    else:
        default_features = True

    return Settings(
        project_root=project_root,
        version=version,
        features=Features.from_flags(names, default_features=default_features),
    )
