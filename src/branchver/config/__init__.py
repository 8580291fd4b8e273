"""Configuration management for branchver."""

from __future__ import annotations

from branchver.config.loader import load_config
from branchver.config.models import BranchverConfig, HistoryConfig, ReleaseConfig

__all__ = [
    "BranchverConfig",
    "HistoryConfig",
    "ReleaseConfig",
    "load_config",
]
