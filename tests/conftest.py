"""Shared test fixtures for branchver tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from branchver.vcs.git import Commit, GitRepository


# =============================================================================
# Mocked repositories
# =============================================================================


@pytest.fixture
def commit_chain():
    """Factory for first-parent chains, newest first; shas are c0, c1, ..."""

    def make_commits(*messages: str) -> list[Commit]:
        return [Commit(sha=f"c{i}", short_sha=f"c{i}", message=m) for i, m in enumerate(messages)]

    return make_commits


@pytest.fixture
def mock_repo(tmp_path: Path) -> MagicMock:
    """A GitRepository mock on branch main with an empty history."""
    repo = MagicMock(spec=GitRepository)
    repo.path = tmp_path
    repo.workdir = tmp_path
    repo.current_branch.return_value = "main"
    repo.head_ref.return_value = "refs/heads/main"
    repo.head_oid.return_value = "c0"
    repo.short_id.return_value = "c0"
    repo.tag_targets.return_value = {}
    repo.iter_first_parent.return_value = iter([])
    return repo


# =============================================================================
# Real git repositories
# =============================================================================


class GitRepoBuilder:
    """Builds throwaway git repositories for integration tests."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "--quiet")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")
        self.git("config", "user.name", "Test User")
        self.git("config", "user.email", "test@example.com")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "tag.gpgsign", "false")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        """Create an empty commit and return its sha."""
        self.git("commit", "--quiet", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")

    def commits(self, count: int, prefix: str = "change") -> list[str]:
        return [self.commit(f"{prefix} {i}") for i in range(count)]

    def tag(self, name: str, *, annotated: bool = True, ref: str = "HEAD") -> None:
        if annotated:
            self.git("tag", "-a", name, "-m", f"Tag {name}", ref)
        else:
            self.git("tag", name, ref)

    def checkout(self, branch: str, *, create: bool = True) -> None:
        if create:
            self.git("checkout", "--quiet", "-b", branch)
        else:
            self.git("checkout", "--quiet", branch)

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def tags(self) -> list[str]:
        return self.git("tag", "--list").splitlines()

    def repository(self) -> GitRepository:
        return GitRepository(self.path)


@pytest.fixture
def isolated_git_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's git configuration out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_INDEX_FILE", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)


@pytest.fixture
def git_repo(tmp_path: Path, isolated_git_env: None) -> GitRepoBuilder:
    """An empty git repository on branch main."""
    if shutil.which("git") is None:
        pytest.skip("git executable not found")
    return GitRepoBuilder(tmp_path / "repo")


@pytest.fixture
def released_repo(git_repo: GitRepoBuilder) -> GitRepoBuilder:
    """Tag 1.4.0 on an ancestor, three commits after it, on main."""
    git_repo.commit("initial import")
    git_repo.tag("1.4.0")
    git_repo.commits(3)
    return git_repo
