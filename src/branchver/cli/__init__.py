"""Command line interface for branchver."""
