"""Locating the last release point in the commit history.

The walk follows first parents only, newest first, so commits merged in from
a side branch never count towards the distance from the release point.
A release point is either a commit whose message starts with the release
marker (``release: 1.4.0``) or a commit carrying a tag whose name parses as
a version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from branchver.config.models import HistoryConfig
from branchver.core.version import SemanticVersion, parse_version
from branchver.exceptions import HistoryTooDeepError

if TYPE_CHECKING:
    from branchver.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryResult:
    """The release point found in history and how far HEAD is from it.

    Attributes:
        release: Version of the release point, None if history has none
        distance: Commits after the release point up to and including HEAD
        current_short_id: Short id of the HEAD commit
    """

    release: SemanticVersion | None
    distance: int
    current_short_id: str

    def head_version(self) -> SemanticVersion:
        """The version derived from history alone."""
        base = self.release or SemanticVersion()
        return replace(
            base,
            patch=base.patch + self.distance,
            identifier=None,
            commit=self.current_short_id,
        )


def build_tag_index(repo: GitRepository) -> dict[str, str]:
    """Map commit ids to the name of the tag pointing at them."""
    return {target: name for name, target in repo.tag_targets().items()}


def release_from_commit(
    commit: Commit,
    tag_index: dict[str, str],
    marker: str = "release:",
) -> SemanticVersion | None:
    """Return the release version recorded on ``commit``, if any.

    A release commit message takes precedence over a tag on the same commit.
    """
    if commit.message.lower().startswith(marker.lower()):
        version = parse_version(commit.message, commit.short_sha)
        if version is not None:
            logger.debug("Release commit %s: %r -> %s", commit.short_sha, commit.summary, version)
            return version

    tag = tag_index.get(commit.sha)
    if tag is not None:
        version = parse_version(tag, commit.short_sha)
        if version is not None:
            logger.debug("Release tag %s on %s -> %s", tag, commit.short_sha, version)
            return version

    return None


def locate_release(
    repo: GitRepository,
    config: HistoryConfig | None = None,
    head: str | None = None,
) -> HistoryResult:
    """Walk back from HEAD to the nearest release point.

    Args:
        repo: Repository to inspect
        config: Release marker and depth bound, defaults if omitted
        head: Commit to start from, the current HEAD if omitted

    Returns:
        The release found (or None) and the distance to it

    Raises:
        HistoryTooDeepError: If more than ``max_depth`` commits precede the
            release point
        GitError: If HEAD does not resolve to a commit
    """
    config = config or HistoryConfig()

    if head is None:
        head = repo.head_oid()
    head_short = repo.short_id(head)
    tag_index = build_tag_index(repo)

    count = 0
    for commit in repo.iter_first_parent(head, limit=config.max_depth + 1):
        release = release_from_commit(commit, tag_index, config.release_marker)
        if release is not None:
            return HistoryResult(release=release, distance=count, current_short_id=head_short)

        logger.debug("%s %s", commit.sha, commit.summary)

        count += 1
        if count > config.max_depth:
            raise HistoryTooDeepError(config.max_depth)

    logger.debug("No release point in %d commits", count)
    return HistoryResult(release=None, distance=count, current_short_id=head_short)
