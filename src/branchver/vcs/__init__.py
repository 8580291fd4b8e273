"""Version control access for branchver."""

from __future__ import annotations

from branchver.vcs.git import Commit, GitRepository, RefUpdate, Signature

__all__ = ["Commit", "GitRepository", "RefUpdate", "Signature"]
