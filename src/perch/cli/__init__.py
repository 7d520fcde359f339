"""Command-line interface for Perch."""

from perch.cli.main import app

__all__ = ["app"]
