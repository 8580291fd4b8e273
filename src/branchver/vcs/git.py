"""Git repository access via the git command line.

All reads and writes go through ``git`` subprocesses. Writes use plumbing
commands only (hash-object, write-tree, commit-tree, mktag, update-ref) so a
release can build its objects first and publish them in one ref transaction.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from branchver.exceptions import (
    GitError,
    GitNotFoundError,
    NoCurrentBranchError,
    NotARepositoryError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)

# Separators for `git log -z` output: records end with NUL, fields with US.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x00"


@dataclass(frozen=True)
class Commit:
    """A commit as seen by the history walk."""

    sha: str
    short_sha: str
    message: str

    @property
    def summary(self) -> str:
        return self.message.strip().splitlines()[0] if self.message.strip() else ""


@dataclass(frozen=True)
class Signature:
    """Identity used for commits and tags written by branchver."""

    name: str
    email: str

    def env(self) -> dict[str, str]:
        """Environment variables making git use this identity."""
        return {
            "GIT_AUTHOR_NAME": self.name,
            "GIT_AUTHOR_EMAIL": self.email,
            "GIT_COMMITTER_NAME": self.name,
            "GIT_COMMITTER_EMAIL": self.email,
        }

    def tagger_line(self, when: datetime | None = None) -> str:
        when = when or datetime.now(UTC)
        return f"{self.name} <{self.email}> {int(when.timestamp())} +0000"


@dataclass(frozen=True)
class RefUpdate:
    """One ref change in an atomic update; ``old`` guards against races."""

    ref: str
    new: str
    old: str | None = None


class GitRepository:
    """A git work tree driven through the ``git`` executable."""

    def __init__(self, path: Path | str = ".") -> None:
        start = Path(path)
        if not start.is_dir():
            raise NotARepositoryError(f"Not a git repository: {start}")

        try:
            toplevel = self._git(start, "rev-parse", "--show-toplevel")
        except GitNotFoundError:
            raise
        except GitError as e:
            raise NotARepositoryError(f"Not a git repository: {start}", e.stderr) from e

        self.path = Path(toplevel)

    # -------------------------------------------------------------------------
    # Command plumbing
    # -------------------------------------------------------------------------

    @staticmethod
    def _git(
        cwd: Path,
        *args: str,
        input: str | None = None,
        env: Mapping[str, str] | None = None,
        strip: bool = True,
    ) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))

        full_env = None
        if env:
            full_env = {**os.environ, **env}

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                input=input,
                env=full_env,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitNotFoundError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e

        return result.stdout.strip() if strip else result.stdout

    def run(self, *args: str, **kwargs) -> str:
        """Run a git command in the work tree and return its stdout."""
        return self._git(self.path, *args, **kwargs)

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    @property
    def workdir(self) -> Path:
        return self.path

    def head_ref(self) -> str:
        """Full name of the branch HEAD points to, e.g. ``refs/heads/main``.

        Raises:
            NoCurrentBranchError: If HEAD is detached
        """
        try:
            return self.run("symbolic-ref", "--quiet", "HEAD")
        except GitError as e:
            raise NoCurrentBranchError("HEAD is detached, no current branch") from e

    def current_branch(self) -> str:
        """Short name of the current branch, e.g. ``main`` or ``feature/x``."""
        try:
            return self.run("symbolic-ref", "--quiet", "--short", "HEAD")
        except GitError as e:
            raise NoCurrentBranchError("HEAD is detached, no current branch") from e

    def head_oid(self) -> str:
        """Object id of the commit HEAD points to."""
        try:
            return self.run("rev-parse", "--verify", "--quiet", "HEAD^{commit}")
        except GitError as e:
            raise GitError("HEAD does not point to a commit", e.stderr) from e

    def short_id(self, oid: str) -> str:
        return self.run("rev-parse", "--short", oid)

    def tag_targets(self) -> dict[str, str]:
        """Map every tag name to the id of the commit it points to.

        Annotated tags are peeled to their target. Tags whose target cannot
        be resolved are left out.
        """
        output = self.run(
            "for-each-ref",
            "--format=%(refname:short)%00%(objecttype)%00%(objectname)%00%(*objectname)",
            "refs/tags",
        )

        targets: dict[str, str] = {}
        for line in output.splitlines():
            parts = line.split("\x00")
            if len(parts) != 4:
                logger.debug("Skipping unreadable tag entry %r", line)
                continue
            name, objtype, oid, peeled = parts
            target = peeled if objtype == "tag" else oid
            if not target:
                logger.debug("Skipping unresolvable tag %s", name)
                continue
            targets[name] = target
        return targets

    def iter_first_parent(self, start: str = "HEAD", limit: int | None = None) -> Iterator[Commit]:
        """Yield commits along the first-parent chain of ``start``, newest first."""
        args = ["log", "--first-parent", "-z", f"--format=%H{_FIELD_SEP}%h{_FIELD_SEP}%B"]
        if limit is not None:
            args.append(f"--max-count={limit}")
        args.append(start)

        output = self.run(*args, strip=False)
        for record in output.split(_RECORD_SEP):
            if not record.strip():
                continue
            sha, short_sha, message = record.lstrip("\n").split(_FIELD_SEP, 2)
            yield Commit(sha=sha, short_sha=short_sha, message=message)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def hash_file(self, path: Path) -> str:
        """Write ``path`` (relative to the work tree) as a blob and return its id."""
        return self.run("hash-object", "-w", "--", path.as_posix())

    def write_tree_with(self, path: Path, blob: str) -> str:
        """Write a tree made of the current index plus ``path`` at ``blob``.

        The user's index is not modified; a temporary copy is staged instead.
        """
        index_file = self.path / self.run("rev-parse", "--git-path", "index")

        with tempfile.TemporaryDirectory(prefix="branchver-") as tmp:
            tmp_index = Path(tmp) / "index"
            if index_file.exists():
                shutil.copyfile(index_file, tmp_index)
            env = {"GIT_INDEX_FILE": str(tmp_index)}
            self.run(
                "update-index",
                "--add",
                "--cacheinfo",
                f"100644,{blob},{path.as_posix()}",
                env=env,
            )
            return self.run("write-tree", env=env)

    def commit_tree(
        self,
        tree: str,
        parents: Sequence[str],
        message: str,
        signature: Signature,
    ) -> str:
        """Create a commit object without moving any ref."""
        args = ["commit-tree", "--no-gpg-sign", tree]
        for parent in parents:
            args.extend(["-p", parent])
        args.extend(["-m", message])
        return self.run(*args, env=signature.env())

    def create_tag(self, name: str, target: str, signature: Signature, message: str) -> str:
        """Create an annotated tag object for commit ``target`` without a ref."""
        content = (
            f"object {target}\n"
            "type commit\n"
            f"tag {name}\n"
            f"tagger {signature.tagger_line()}\n"
            "\n"
            f"{message}\n"
        )
        return self.run("mktag", input=content)

    def update_refs(self, updates: Sequence[RefUpdate]) -> None:
        """Apply all ref updates in one transaction: all of them or none."""
        lines = []
        for update in updates:
            line = f"update {update.ref} {update.new}"
            if update.old is not None:
                line += f" {update.old}"
            lines.append(line)
        self.run("update-ref", "--stdin", input="\n".join(lines) + "\n")

    def stage(self, path: Path, blob: str) -> None:
        """Record ``path`` at ``blob`` in the user's index."""
        self.run("update-index", "--add", "--cacheinfo", f"100644,{blob},{path.as_posix()}")
