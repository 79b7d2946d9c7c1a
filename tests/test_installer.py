"""End-to-end tests for hook installation against on-disk repositories."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

from stamphook.errors import InstallFailed, UserHooksError
from stamphook.hooks.features import Features
from stamphook.hooks.types import InstallOutcome
from stamphook.hooks.user_hooks import USER_HOOKS_DIR
from stamphook.hooks.writer import find_marker_version, marker_line
from stamphook.installer import install_hooks, render_hooks, run_from_environment
from tests.helpers.git_layout import (
    make_linked_worktree,
    make_repository,
    write_executable,
)


def _hook(root: Path, name: str) -> Path:
    return root / ".git" / "hooks" / name


class TestInstallHooks:
    """Tests for install_hooks function."""

    def test_default_behavior(self, tmp_path: Path) -> None:
        """Defaults install a pre-push hook running the tests, nothing else."""
        root = make_repository(tmp_path / "repo")
        results = install_hooks(root, "0.1.0", Features.from_flags())

        assert [(r.name, r.outcome) for r in results] == [
            ("pre-push", InstallOutcome.INSTALLED)
        ]
        script = _hook(root, "pre-push").read_text()
        lines = script.splitlines()
        assert lines[0] == "#!/bin/sh"
        assert "set by stamphook v0.1.0" in lines[2]
        assert lines.count("python -m pytest") == 1
        assert "ruff check ." not in lines
        assert not _hook(root, "pre-commit").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_hook_file_is_executable(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        install_hooks(root, "0.1.0", Features.from_flags())
        assert _hook(root, "pre-push").stat().st_mode & 0o555 == 0o555

    def test_change_features(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        features = Features.from_flags(
            ["precommit-hook", "run-lint", "run-typecheck", "run-format-check"],
            default_features=False,
        )
        install_hooks(root, "0.1.0", features)

        assert not _hook(root, "pre-push").exists()
        lines = _hook(root, "pre-commit").read_text().splitlines()
        assert "python -m pytest" not in lines
        for command in ("mypy .", "ruff check .", "ruff format --check ."):
            assert lines.count(command) == 1

    def test_hook_not_updated_twice(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        install_hooks(root, "0.1.0", Features.from_flags())
        path = _hook(root, "pre-push")
        first = path.read_bytes()
        first_mtime = path.stat().st_mtime_ns

        results = install_hooks(root, "0.1.0", Features.from_flags())

        assert results[0].outcome is InstallOutcome.UP_TO_DATE
        assert path.read_bytes() == first
        assert path.stat().st_mtime_ns == first_mtime

    def test_regenerated_on_version_change(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        install_hooks(root, "0.1.0", Features.from_flags())

        results = install_hooks(root, "0.2.0", Features.from_flags())

        assert results[0].outcome is InstallOutcome.UPDATED
        content = _hook(root, "pre-push").read_text()
        assert find_marker_version(content) == "0.2.0"
        assert marker_line("0.1.0") not in content

    @pytest.mark.parametrize(
        "content",
        [
            "#!/bin/sh\necho 'hook put by someone else'\n",
            "#!/bin/sh\n\n\necho 'hook put by someone else'\n",
        ],
    )
    def test_another_hook_untouched(self, tmp_path: Path, content: str) -> None:
        root = make_repository(tmp_path / "repo")
        _hook(root, "pre-push").write_text(content)

        results = install_hooks(root, "0.1.0", Features.from_flags())

        assert results[0].outcome is InstallOutcome.SKIPPED_FOREIGN
        assert _hook(root, "pre-push").read_text() == content

    def test_foreign_skip_is_reported(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        root = make_repository(tmp_path / "repo")
        _hook(root, "pre-push").write_text("#!/bin/sh\nexit 0\n")
        monkeypatch.setattr(logging.getLogger("stamphook"), "propagate", True)

        with caplog.at_level(logging.WARNING, logger="stamphook"):
            install_hooks(root, "0.1.0", Features.from_flags())

        assert "not set by stamphook" in caplog.text

    def test_creates_missing_hooks_dir(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo", with_hooks_dir=False)
        install_hooks(root, "0.1.0", Features.from_flags())
        assert _hook(root, "pre-push").is_file()

    def test_worktree_installs_into_common_dir(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        worktree = make_linked_worktree(root, tmp_path / "wt", name="wt")

        results = install_hooks(worktree, "0.1.0", Features.from_flags())

        assert results[0].path == _hook(root, "pre-push")
        assert _hook(root, "pre-push").is_file()
        assert not (root / ".git" / "worktrees" / "wt" / "hooks").exists()

    def test_not_a_repository_is_non_fatal(self, tmp_path: Path) -> None:
        """Without a repository nothing is written and nothing is raised."""
        if any((p / ".git").exists() for p in tmp_path.parents):
            pytest.skip("temporary directory is itself inside a git repository")
        project = tmp_path / "project"
        project.mkdir()

        assert install_hooks(project, "0.1.0", Features.from_flags()) == []
        assert list(tmp_path.rglob("*")) == [project]

    def test_malformed_gitdir_is_non_fatal(self, tmp_path: Path) -> None:
        project = tmp_path / "project"
        project.mkdir()
        (project / ".git").write_text("garbage\n")

        assert install_hooks(project, "0.1.0", Features.from_flags()) == []

    def test_no_events_is_a_no_op(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        features = Features.from_flags(["run-lint"], default_features=False)

        assert install_hooks(root, "0.1.0", features) == []
        assert list((root / ".git" / "hooks").iterdir()) == []

    def test_write_failure_is_fatal(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_repository(tmp_path / "repo")

        def failing_replace(src: str, dst: object) -> None:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(InstallFailed) as exc_info:
            install_hooks(root, "0.1.0", Features.from_flags())
        assert exc_info.value.path == _hook(root, "pre-push")


@pytest.mark.skipif(sys.platform == "win32", reason="executable bits are POSIX only")
class TestUserHooks:
    """Tests for installing project-provided hooks."""

    def test_user_hooks_installed(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        hooks = root / USER_HOOKS_DIR
        write_executable(
            hooks / "pre-commit",
            "#! /bin/sh\n\n# This is a user script for pre-commit hook with shebang\n",
        )
        write_executable(hooks / "post-merge", "# Script without shebang\n")
        (hooks / "non-executable-file.txt").write_text("foo\nbar\n")

        features = Features.from_flags(["user-hooks"])
        results = install_hooks(root, "0.1.0", features)

        assert sorted(r.name for r in results) == ["post-merge", "pre-commit"]
        assert not _hook(root, "pre-push").exists()
        assert not _hook(root, "non-executable-file.txt").exists()

        lines = _hook(root, "pre-commit").read_text().splitlines()
        assert lines[0] == "#! /bin/sh"
        assert lines[2] == marker_line("0.1.0")
        for name in ("pre-commit", "post-merge"):
            assert os.access(_hook(root, name), os.X_OK)

    def test_user_hooks_idempotent(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        write_executable(root / USER_HOOKS_DIR / "pre-commit", "#!/bin/sh\nmake\n")
        features = Features.from_flags(["user-hooks"], default_features=False)

        install_hooks(root, "0.1.0", features)
        [result] = install_hooks(root, "0.1.0", features)

        assert result.outcome is InstallOutcome.UP_TO_DATE

    def test_user_hooks_dir_not_found(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        features = Features.from_flags(["user-hooks"], default_features=False)

        with pytest.raises(UserHooksError, match="User hooks directory is not found"):
            install_hooks(root, "0.1.0", features)


class TestRenderHooks:
    """Tests for render_hooks function."""

    def test_renders_without_repository(self, tmp_path: Path) -> None:
        scripts = render_hooks(tmp_path, "0.1.0", Features.from_flags())
        assert [s.name for s in scripts] == ["pre-push"]
        assert list(tmp_path.iterdir()) == []


class TestRunFromEnvironment:
    """Tests for run_from_environment function."""

    def test_uses_environment(self, tmp_path: Path) -> None:
        root = make_repository(tmp_path / "repo")
        results = run_from_environment(
            {
                "STAMPHOOK_PROJECT_ROOT": str(root),
                "STAMPHOOK_VERSION": "3.1.4",
                "STAMPHOOK_FEATURES": "postmerge-hook",
            }
        )

        assert sorted(r.name for r in results) == ["post-merge", "pre-push"]
        assert find_marker_version(_hook(root, "post-merge").read_text()) == "3.1.4"
