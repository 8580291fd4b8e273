"""Loading the branchver configuration from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from branchver.config.models import BranchverConfig
from branchver.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
TOOL_KEY = "branchver"


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Args:
        path: Path to the pyproject.toml file

    Returns:
        Parsed TOML document

    Raises:
        ConfigValidationError: If the file is not valid TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_branchver_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the [tool.branchver] table, or an empty dict when absent."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def load_config(path: Path | None = None) -> BranchverConfig:
    """Load configuration for the repository rooted at ``path``.

    A missing pyproject.toml or a missing [tool.branchver] table yields the
    default configuration.

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    root = path if path is not None else Path.cwd()
    pyproject_path = root / PYPROJECT

    if not pyproject_path.is_file():
        logger.debug("No %s in %s, using defaults", PYPROJECT, root)
        return BranchverConfig()

    data = extract_branchver_config(load_pyproject_toml(pyproject_path))
    try:
        return BranchverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid [tool.{TOOL_KEY}] configuration in {pyproject_path}:\n{e}"
        ) from e
