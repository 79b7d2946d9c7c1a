"""Install version-stamped Git hooks that run a project's checks."""

__version__ = "0.1.0"
