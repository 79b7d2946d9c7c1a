"""Git repository layout helpers."""

from stamphook.git.locator import find_admin_dir, find_hooks_dir

__all__ = [
    "find_admin_dir",
    "find_hooks_dir",
]
