"""Command line interface for versionize."""

from __future__ import annotations

from versionize.cli.app import app

__all__ = ["app"]
