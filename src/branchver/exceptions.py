"""Exception hierarchy for branchver.

Backend failures (anything git reports) derive from GitError, domain failures
have one class each, and configuration problems derive from ConfigError.
Every exception derives from BranchverError so the CLI can report them
uniformly.
"""

from __future__ import annotations


class BranchverError(Exception):
    """Base class for all branchver errors."""


# =============================================================================
# Git backend
# =============================================================================


class GitError(BranchverError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr and self.stderr.strip():
            return f"{message}: {self.stderr.strip().splitlines()[-1]}"
        return message


class NotARepositoryError(GitError):
    """The given path is not inside a git work tree."""


class GitNotFoundError(GitError):
    """The git executable is not installed or not on PATH."""


# =============================================================================
# Version derivation
# =============================================================================


class NoCurrentBranchError(BranchverError):
    """HEAD does not point to a branch (detached HEAD)."""


class HistoryTooDeepError(BranchverError):
    """No release point was found within the configured number of commits."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(
            f"history too deep: no release point within {max_depth} commits"
        )
        self.max_depth = max_depth


class VersionMismatchError(BranchverError):
    """Branch name and history disagree on a major/minor component."""

    def __init__(self, component: str, branch: int, head: int) -> None:
        super().__init__(
            f"{component} version mismatch: branch says {branch}, history says {head} "
            f"({branch} != {head})"
        )
        self.component = component
        self.branch = branch
        self.head = head


# =============================================================================
# Release
# =============================================================================


class NothingToReleaseError(BranchverError):
    """The current commit already is a release point."""

    def __init__(self, version: str) -> None:
        super().__init__(f"nothing to release: already on release commit {version}")
        self.version = version


class ReleaseError(BranchverError):
    """Writing the release commit or tag failed; the repository was rolled back."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(BranchverError):
    """Base class for configuration errors."""


class ConfigValidationError(ConfigError):
    """The [tool.branchver] configuration is malformed."""
