"""branchver: semantic versions from git branch names and history."""

from __future__ import annotations

__version__ = "0.1.0"
