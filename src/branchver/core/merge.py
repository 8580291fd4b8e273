"""Reconciling the branch-derived and history-derived versions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from branchver.config.models import BranchverConfig
from branchver.core.branch import (
    BranchCategory,
    Feature,
    Fix,
    Master,
    Other,
    Release,
    branch_category,
)
from branchver.core.history import HistoryResult, locate_release
from branchver.core.version import SemanticVersion
from branchver.exceptions import VersionMismatchError

if TYPE_CHECKING:
    from branchver.vcs.git import GitRepository

logger = logging.getLogger(__name__)


def merge_component(branch: int, head: int, component: str = "major") -> int:
    """Merge one version component; 0 means unconstrained.

    Raises:
        VersionMismatchError: If both are set and differ
    """
    if branch == 0 or head == 0:
        return branch + head
    if branch == head:
        return branch
    raise VersionMismatchError(component, branch, head)


def merge_versions(
    branch: BranchCategory,
    history: HistoryResult,
    config: BranchverConfig | None = None,
) -> SemanticVersion:
    """Combine the branch category with the history result into one version.

    * mainline branches get the history-derived version as is
    * version branches must agree with history on major/minor
    * feature and fix branches carry their name as identifier
    * any other branch is marked with the configured "other" identifier
    """
    config = config or BranchverConfig()
    headv = history.head_version()

    match branch:
        case Master():
            return headv
        case Release(version=branchv):
            return SemanticVersion(
                major=merge_component(branchv.major, headv.major, "major"),
                minor=merge_component(branchv.minor, headv.minor, "minor"),
                patch=headv.patch,
                commit=headv.commit,
            )
        case Feature(name=name) | Fix(name=name):
            return headv.with_identifier(name)
        case Other():
            return headv.with_identifier(config.other_identifier)

    raise TypeError(f"Unknown branch category: {branch!r}")


def derive_version(
    repo: GitRepository,
    config: BranchverConfig | None = None,
    *,
    head: str | None = None,
) -> SemanticVersion:
    """Compute the version of the current checkout of ``repo``.

    ``head`` pins the commit history is walked from; it defaults to HEAD.
    """
    config = config or BranchverConfig()

    branch = branch_category(repo, config)
    logger.debug("Branch: %s", branch)

    history = locate_release(repo, config.history, head)
    logger.debug("Head: %s", history)

    version = merge_versions(branch, history, config)
    logger.debug("Version: %s (commit %s)", version, version.commit)
    return version
