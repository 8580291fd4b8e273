"""Allow running branchver as ``python -m branchver``."""

from __future__ import annotations

from branchver.cli.main import app

if __name__ == "__main__":
    app()
