"""Tests for the release point lookup in history."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from branchver.config.models import HistoryConfig
from branchver.core.history import (
    HistoryResult,
    build_tag_index,
    locate_release,
    release_from_commit,
)
from branchver.core.version import SemanticVersion
from branchver.exceptions import GitError, HistoryTooDeepError
from branchver.vcs.git import Commit


class TestHistoryResult:
    """Tests for HistoryResult.head_version()."""

    def test_adds_distance_to_patch(self):
        result = HistoryResult(SemanticVersion(1, 4, 0, commit="rel"), 3, "head")

        assert result.head_version() == SemanticVersion(1, 4, 3, commit="head")

    def test_no_release_starts_at_zero(self):
        result = HistoryResult(None, 5, "head")

        assert result.head_version() == SemanticVersion(0, 0, 5, commit="head")

    def test_on_release_point(self):
        result = HistoryResult(SemanticVersion(2, 1, 0), 0, "head")

        assert str(result.head_version()) == "2.1.0"


class TestBuildTagIndex:
    """Tests for build_tag_index()."""

    def test_maps_targets_to_names(self, mock_repo: MagicMock):
        mock_repo.tag_targets.return_value = {"1.0.0": "c2", "v2.0.0": "c5"}

        assert build_tag_index(mock_repo) == {"c2": "1.0.0", "c5": "v2.0.0"}


class TestReleaseFromCommit:
    """Tests for release_from_commit()."""

    def test_release_message(self):
        commit = Commit("c1", "c1", "release: 1.5.0\n")

        assert release_from_commit(commit, {}) == SemanticVersion(1, 5, 0, commit="c1")

    def test_release_message_case_insensitive(self):
        commit = Commit("c1", "c1", "Release: v2.1")

        assert release_from_commit(commit, {}) == SemanticVersion(2, 1, 0, commit="c1")

    def test_marker_must_start_message(self):
        commit = Commit("c1", "c1", "prepare release: 1.5.0")

        assert release_from_commit(commit, {}) is None

    def test_marker_without_version(self):
        commit = Commit("c1", "c1", "release: the big one")

        assert release_from_commit(commit, {}) is None

    def test_tag(self):
        commit = Commit("c1", "c1", "some change")

        assert release_from_commit(commit, {"c1": "v1.2.3"}) == SemanticVersion(1, 2, 3, commit="c1")

    def test_tag_without_version(self):
        commit = Commit("c1", "c1", "some change")

        assert release_from_commit(commit, {"c1": "stable"}) is None

    def test_message_beats_tag(self):
        commit = Commit("c1", "c1", "release: 3.0.0")

        assert release_from_commit(commit, {"c1": "1.0.0"}) == SemanticVersion(3, 0, 0, commit="c1")

    def test_marker_falls_back_to_tag(self):
        commit = Commit("c1", "c1", "release: soon")

        assert release_from_commit(commit, {"c1": "1.0.0"}) == SemanticVersion(1, 0, 0, commit="c1")

    def test_custom_marker(self):
        commit = Commit("c1", "c1", "chore(release): 1.2.0")

        assert release_from_commit(commit, {}, "chore(release):") == SemanticVersion(
            1, 2, 0, commit="c1"
        )


class TestLocateRelease:
    """Tests for locate_release()."""

    def test_stops_at_first_release_point(self, mock_repo: MagicMock, commit_chain):
        """C3's tag is never reached once C2's is found."""
        mock_repo.iter_first_parent.return_value = iter(commit_chain("c0", "c1", "c2", "c3"))
        mock_repo.tag_targets.return_value = {"1.0.0": "c2", "2.0.0": "c3"}

        result = locate_release(mock_repo)

        assert result == HistoryResult(SemanticVersion(1, 0, 0, commit="c2"), 2, "c0")

    def test_head_is_release_point(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(commit_chain("release: 1.5.0", "older"))

        result = locate_release(mock_repo)

        assert result.distance == 0
        assert result.release == SemanticVersion(1, 5, 0, commit="c0")

    def test_release_commit(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(
            commit_chain("fix typo", "add feature", "release: 1.2.0", "initial")
        )

        result = locate_release(mock_repo)

        assert result.release == SemanticVersion(1, 2, 0, commit="c2")
        assert result.distance == 2

    def test_no_release(self, mock_repo: MagicMock, commit_chain):
        """Without release points the distance is the chain length."""
        mock_repo.iter_first_parent.return_value = iter(commit_chain("a", "b", "c", "d", "e"))

        result = locate_release(mock_repo)

        assert result == HistoryResult(None, 5, "c0")

    def test_unparseable_tag_ignored(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(commit_chain("a", "b", "c"))
        mock_repo.tag_targets.return_value = {"stable": "c1", "v0.9": "c2"}

        result = locate_release(mock_repo)

        assert result.release == SemanticVersion(0, 9, 0, commit="c2")
        assert result.distance == 2

    def test_walk_starts_at_head_with_bound(self, mock_repo: MagicMock):
        locate_release(mock_repo, HistoryConfig(max_depth=10))

        mock_repo.iter_first_parent.assert_called_once_with("c0", limit=11)

    def test_walk_from_given_head(self, mock_repo: MagicMock):
        locate_release(mock_repo, head="abc")

        mock_repo.head_oid.assert_not_called()
        mock_repo.iter_first_parent.assert_called_once_with("abc", limit=4097)

    def test_current_short_id(self, mock_repo: MagicMock, commit_chain):
        mock_repo.head_oid.return_value = "0123456789abcdef"
        mock_repo.short_id.return_value = "0123456"
        mock_repo.iter_first_parent.return_value = iter(commit_chain("a"))

        result = locate_release(mock_repo)

        assert result.current_short_id == "0123456"
        mock_repo.short_id.assert_called_once_with("0123456789abcdef")

    def test_too_deep(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(commit_chain(*"abcdef"))

        with pytest.raises(HistoryTooDeepError, match="3 commits"):
            locate_release(mock_repo, HistoryConfig(max_depth=3))

    def test_exactly_at_bound(self, mock_repo: MagicMock, commit_chain):
        """Exhausting history at the bound is not an error."""
        mock_repo.iter_first_parent.return_value = iter(commit_chain(*"abc"))

        result = locate_release(mock_repo, HistoryConfig(max_depth=3))

        assert result == HistoryResult(None, 3, "c0")

    def test_release_found_at_bound(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(commit_chain("a", "b", "c", "release: 1.0"))

        result = locate_release(mock_repo, HistoryConfig(max_depth=3))

        assert result.distance == 3
        assert result.release == SemanticVersion(1, 0, 0, commit="c3")

    def test_default_bound(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(
            commit_chain(*(f"change {i}" for i in range(4097)))
        )

        with pytest.raises(HistoryTooDeepError, match="4096"):
            locate_release(mock_repo)

    def test_missing_head(self, mock_repo: MagicMock):
        mock_repo.head_oid.side_effect = GitError("HEAD does not point to a commit")

        with pytest.raises(GitError):
            locate_release(mock_repo)

    def test_custom_marker(self, mock_repo: MagicMock, commit_chain):
        mock_repo.iter_first_parent.return_value = iter(
            commit_chain("a", "release: 9.0.0", "chore(release): 1.1.0")
        )

        result = locate_release(mock_repo, HistoryConfig(release_marker="chore(release):"))

        assert result.release == SemanticVersion(1, 1, 0, commit="c2")
        assert result.distance == 2

    def test_traces_walk(self, mock_repo: MagicMock, commit_chain, caplog: pytest.LogCaptureFixture):
        caplog.set_level("DEBUG", logger="branchver")
        mock_repo.iter_first_parent.return_value = iter(commit_chain("add login form"))

        locate_release(mock_repo)

        assert "add login form" in caplog.text
