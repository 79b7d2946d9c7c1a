"""Feature flags and their mapping to a hook configuration."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from stamphook.errors import UnknownFeatureError
from stamphook.hooks.types import HookConfiguration, HookEvent

__all__ = [
    "COMMAND_FEATURES",
    "DEFAULT_FEATURES",
    "EVENT_FEATURES",
    "KNOWN_FEATURES",
    "Features",
    "resolve_configuration",
]

# Feature name -> hook event it enables.
EVENT_FEATURES: dict[str, HookEvent] = {
    "precommit-hook": HookEvent.PRE_COMMIT,
    "prepush-hook": HookEvent.PRE_PUSH,
    "postmerge-hook": HookEvent.POST_MERGE,
}

# Feature name -> command appended to every enabled event, in run order.
COMMAND_FEATURES: dict[str, str] = {
    "run-tests": "python -m pytest",
    "run-typecheck": "mypy .",
    "run-lint": "ruff check .",
    "run-format-check": "ruff format --check .",
}

USER_HOOKS_FEATURE = "user-hooks"

KNOWN_FEATURES: tuple[str, ...] = (
    *EVENT_FEATURES,
    *COMMAND_FEATURES,
    USER_HOOKS_FEATURE,
)

DEFAULT_FEATURES: tuple[str, ...] = ("prepush-hook", "run-tests")


def _field_name(feature: str) -> str:
    return feature.replace("-", "_")


@dataclasses.dataclass(frozen=True)
class Features:
    """Enabled feature flags, one boolean per recognized flag."""

    precommit_hook: bool = False
    prepush_hook: bool = False
    postmerge_hook: bool = False
    run_tests: bool = False
    run_typecheck: bool = False
    run_lint: bool = False
    run_format_check: bool = False
    user_hooks: bool = False

    @classmethod
    def from_flags(
        cls, flags: Iterable[str] = (), *, default_features: bool = True
    ) -> Features:
        """
        Build a Features record from kebab-case flag names.

        Args:
            flags: Feature names to enable.
            default_features: Whether DEFAULT_FEATURES are enabled as well.

        Returns:
            Features with the named flags set.

        Raises:
            UnknownFeatureError: If a flag name is not recognized.
        """
        names = list(DEFAULT_FEATURES) if default_features else []
        names.extend(flag.strip() for flag in flags if flag.strip())
        values: dict[str, bool] = {}
        for name in names:
            if name not in KNOWN_FEATURES:
                raise UnknownFeatureError(name, KNOWN_FEATURES)
            values[_field_name(name)] = True
        return cls(**values)

    def enabled(self) -> tuple[str, ...]:
        """Names of the enabled flags, in KNOWN_FEATURES order."""
        return tuple(name for name in KNOWN_FEATURES if self.is_enabled(name))

    def is_enabled(self, feature: str) -> bool:
        return bool(getattr(self, _field_name(feature)))


def resolve_configuration(features: Features) -> HookConfiguration:
    """Map enabled features to the commands each hook event runs.

    Every enabled event gets every enabled command. Command flags without
    any event flag yield an empty configuration.
    """
    commands = tuple(
        command
        for feature, command in COMMAND_FEATURES.items()
        if features.is_enabled(feature)
    )
    return HookConfiguration(
        {
            event: commands
            for feature, event in EVENT_FEATURES.items()
            if features.is_enabled(feature)
        }
    )
