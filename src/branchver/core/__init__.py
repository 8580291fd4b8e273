"""Core version derivation logic for branchver.

This module contains the fundamental building blocks:
- Version extraction from branch names, tags and commit messages
- Branch classification
- Release point lookup in the first-parent history
- Merging branch and history versions
- Cutting releases
"""

from __future__ import annotations

from branchver.core.branch import (
    BranchCategory,
    Feature,
    Fix,
    Master,
    Other,
    Release,
    branch_category,
    classify_branch,
)
from branchver.core.history import HistoryResult, build_tag_index, locate_release
from branchver.core.merge import derive_version, merge_component, merge_versions
from branchver.core.release import ReleasePlan, cut_release, plan_release, release_tag_name
from branchver.core.version import SemanticVersion, parse_version

__all__ = [
    # Branch
    "BranchCategory",
    "Feature",
    "Fix",
    # History
    "HistoryResult",
    "Master",
    "Other",
    "Release",
    # Release
    "ReleasePlan",
    # Version
    "SemanticVersion",
    "branch_category",
    "build_tag_index",
    "classify_branch",
    "cut_release",
    # Merge
    "derive_version",
    "locate_release",
    "merge_component",
    "merge_versions",
    "parse_version",
    "plan_release",
    "release_tag_name",
]
