"""Cutting a release.

A release bumps the minor version of the current checkout, writes a
changelog stub, commits it on the current branch and tags the commit.

The commit and tag objects are created first without any ref pointing at
them; the branch and the tag ref are then moved together in a single ref
transaction. If anything fails before the transaction is applied, the
changelog stub is rolled back and no ref changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from branchver.config.models import BranchverConfig, ReleaseConfig
from branchver.core.merge import derive_version
from branchver.core.version import SemanticVersion
from branchver.exceptions import GitError, NothingToReleaseError, ReleaseError
from branchver.vcs.git import RefUpdate, Signature

if TYPE_CHECKING:
    from branchver.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Everything a release will write, computed before touching the repository.

    ``head`` is the commit the current version was derived from. The release
    commit is built on it and the branch only moves if it still points there.
    """

    current: SemanticVersion
    version: SemanticVersion
    changelog: Path
    tag: str
    head: str

    @property
    def commit_message(self) -> str:
        return f"release: {self.version}"

    @property
    def tag_message(self) -> str:
        return f"Release {self.tag}"


def release_tag_name(version: SemanticVersion, config: ReleaseConfig | None = None) -> str:
    """Tag name for a release, e.g. ``P1-5`` or ``P1-5-beta``."""
    config = config or ReleaseConfig()
    name = config.tag_template.format(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        version=version,
    )
    if version.identifier is not None:
        name += f"-{version.identifier}"
    return name


def changelog_filename(version: SemanticVersion, config: ReleaseConfig | None = None) -> Path:
    config = config or ReleaseConfig()
    return Path(
        config.changelog_template.format(
            major=version.major,
            minor=version.minor,
            patch=version.patch,
            version=version,
        )
    )


def plan_release(
    current: SemanticVersion,
    config: ReleaseConfig | None = None,
    *,
    head: str,
) -> ReleasePlan:
    """Work out the next release from the current version.

    Raises:
        NothingToReleaseError: If the current commit already is a release point
    """
    if current.patch == 0:
        raise NothingToReleaseError(str(current))

    version = current.next_minor()
    return ReleasePlan(
        current=current,
        version=version,
        changelog=changelog_filename(version, config),
        tag=release_tag_name(version, config),
        head=head,
    )


def cut_release(
    repo: GitRepository,
    config: BranchverConfig | None = None,
    *,
    dry_run: bool = False,
) -> SemanticVersion:
    """Release the current checkout of ``repo``.

    Args:
        repo: Repository to release
        config: Configuration, defaults if omitted
        dry_run: Only compute the release, write nothing

    Returns:
        The new release version

    Raises:
        NothingToReleaseError: If HEAD already is a release point
        ReleaseError: If writing the release failed (repository rolled back)
    """
    config = config or BranchverConfig()

    head = repo.head_oid()
    current = derive_version(repo, config, head=head)
    plan = plan_release(current, config.release, head=head)

    if dry_run:
        logger.info("Dry run: would release %s as %s (tag %s)", current, plan.version, plan.tag)
        return plan.version

    write_release(repo, plan, config.release)
    return plan.version


def write_release(repo: GitRepository, plan: ReleasePlan, config: ReleaseConfig) -> None:
    """Write the changelog stub, the release commit and its tag."""
    signature = Signature(config.author_name, config.author_email)
    changelog = repo.workdir / plan.changelog
    previous = changelog.read_bytes() if changelog.is_file() else None

    branch_ref = repo.head_ref()
    parent = plan.head

    try:
        with changelog.open("w", encoding="utf-8") as f:
            f.write(f"Changes for version {plan.version}\n")
        logger.info("Wrote %s", plan.changelog)

        blob = repo.hash_file(plan.changelog)
        tree = repo.write_tree_with(plan.changelog, blob)
        commit = repo.commit_tree(tree, [parent], plan.commit_message, signature)
        tag = repo.create_tag(plan.tag, commit, signature, plan.tag_message)

        repo.update_refs(
            [
                RefUpdate(branch_ref, commit, parent),
                RefUpdate(f"refs/tags/{plan.tag}", tag),
            ]
        )
    except (GitError, OSError) as e:
        _restore(changelog, previous)
        raise ReleaseError(f"release {plan.version} failed, nothing was changed: {e}") from e

    logger.info("Committed %s on %s as %s", plan.commit_message, branch_ref, commit)
    logger.info("Tagged %s as %s", commit, plan.tag)

    try:
        repo.stage(plan.changelog, blob)
    except GitError as e:
        logger.warning(
            "Release %s is in place but the index was not updated (%s); run 'git reset'",
            plan.version,
            e,
        )


def _restore(path: Path, previous: bytes | None) -> None:
    logger.warning("Rolling back %s", path.name)
    try:
        if previous is None:
            path.unlink(missing_ok=True)
        else:
            path.write_bytes(previous)
    except OSError as e:
        logger.warning("Could not roll back %s: %s", path, e)
