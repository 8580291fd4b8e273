"""Pydantic models for the [tool.branchver] configuration table."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HistoryConfig(BaseModel):
    """How the commit history is searched for release points."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    release_marker: str = Field(
        default="release:",
        min_length=1,
        description="Commit message prefix (case-insensitive) marking a release commit",
    )
    max_depth: int = Field(
        default=4096,
        ge=1,
        description="Maximum number of commits walked before giving up",
    )


class ReleaseConfig(BaseModel):
    """How a release is recorded."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    changelog_template: str = Field(
        default="changes.{version}",
        description="File name of the changelog stub, formatted with the new version",
    )
    tag_template: str = Field(
        default="P{major}-{minor}",
        description="Release tag name, formatted with the version's components",
    )
    author_name: str = "Peter Panoo"
    author_email: str = "peter@panoo.com"

    @field_validator("changelog_template", "tag_template")
    @classmethod
    def check_template(cls, value: str) -> str:
        """Templates may only use the ``major``, ``minor``, ``patch`` and ``version`` fields."""
        from branchver.core.version import SemanticVersion

        sample = SemanticVersion(1, 2, 0)
        try:
            value.format(major=sample.major, minor=sample.minor, patch=sample.patch, version=sample)
        except (KeyError, IndexError, AttributeError, TypeError, ValueError) as e:
            raise ValueError(f"invalid template {value!r}: {e!r}") from e
        return value


class BranchverConfig(BaseModel):
    """Root configuration for branchver."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    master_branches: list[str] = Field(
        default_factory=lambda: ["master", "main", "release"],
        description="Branch names that carry the plain history-derived version",
    )
    feature_prefix: str = "feature/"
    fix_prefix: str = "fix/"
    other_identifier: str = Field(
        default="other",
        description="Identifier attached to versions built on unrecognized branches",
    )

    history: HistoryConfig = Field(default_factory=HistoryConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
