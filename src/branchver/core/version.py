"""Semantic versions and the tolerant version extractor.

Versions are recognised anywhere in free text: branch names
(``release-1-2-3``), tag names (``v1.2.3``) and commit messages
(``release: 1.5.0``). Up to three numeric groups separated by ``.`` or ``-``
are read, optionally preceded by a single letter; missing groups are 0.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(
    r"(?P<prefix>[a-z])?(?P<major>\d+)(?:[.\-](?P<minor>\d+))?(?:[.\-](?P<patch>\d+))?",
    re.ASCII,
)


@dataclass(frozen=True)
class SemanticVersion:
    """A ``major.minor.patch[-identifier]`` version.

    ``commit`` holds the short id of the commit the version was computed for;
    it is informational and not part of the rendered string.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    identifier: str | None = None
    commit: str | None = None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.identifier is not None:
            return f"{base}-{self.identifier}"
        return base

    def with_identifier(self, identifier: str | None) -> SemanticVersion:
        return replace(self, identifier=identifier)

    def next_minor(self) -> SemanticVersion:
        """Return the next release version: minor + 1, patch 0, no identifier."""
        return SemanticVersion(self.major, self.minor + 1, 0)


def parse_version(text: str, commit: str | None = None) -> SemanticVersion | None:
    """Extract a version from free text.

    Args:
        text: Branch name, tag name or commit message
        commit: Short commit id to attach to the result

    Returns:
        The first version found in ``text``, or None if there is none
    """
    match = VERSION_PATTERN.search(text.lower())
    if match is None:
        return None

    version = SemanticVersion(
        major=_to_number(match.group("major")),
        minor=_to_number(match.group("minor")),
        patch=_to_number(match.group("patch")),
        commit=commit,
    )
    logger.debug("Parsed %r from %r (groups: %s)", str(version), text, match.groups())
    return version


def _to_number(group: str | None) -> int:
    return int(group) if group else 0
