"""What the branch name tells us about the version.

A branch is classified into exactly one category, first match wins:

1. the name contains a version (``2.0``, ``release-1-2``) -> Release
2. a mainline name (``master``, ``main``, ``release``)     -> Master
3. ``feature/<name>``                                       -> Feature
4. ``fix/<name>``                                           -> Fix
5. anything else                                            -> Other
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from branchver.config.models import BranchverConfig
from branchver.core.version import SemanticVersion, parse_version

if TYPE_CHECKING:
    from branchver.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Master:
    """master, main, release"""


@dataclass(frozen=True)
class Release:
    """A branch named after a version, e.g. ``1.2`` or ``release-1-2-3``."""

    version: SemanticVersion


@dataclass(frozen=True)
class Feature:
    name: str


@dataclass(frozen=True)
class Fix:
    name: str


@dataclass(frozen=True)
class Other:
    name: str


BranchCategory = Master | Release | Feature | Fix | Other


def classify_branch(name: str, config: BranchverConfig | None = None) -> BranchCategory:
    """Classify a branch name.

    Args:
        name: Short branch name (case does not matter)
        config: Branch naming configuration, defaults if omitted

    Returns:
        The branch category
    """
    config = config or BranchverConfig()
    branch = name.lower()

    version = parse_version(branch)
    if version is not None:
        return Release(version)

    if branch in (b.lower() for b in config.master_branches):
        return Master()
    feature_prefix = config.feature_prefix.lower()
    fix_prefix = config.fix_prefix.lower()
    if branch.startswith(feature_prefix):
        return Feature(branch[len(feature_prefix) :])
    if branch.startswith(fix_prefix):
        return Fix(branch[len(fix_prefix) :])
    return Other(branch)


def branch_category(repo: GitRepository, config: BranchverConfig | None = None) -> BranchCategory:
    """Classify the branch currently checked out in ``repo``.

    Raises:
        NoCurrentBranchError: If HEAD is detached
    """
    name = repo.current_branch()
    category = classify_branch(name, config)
    logger.debug("Branch %r classified as %s", name, category)
    return category
