# wikimedia/cli/__init__.py
from __future__ import annotations
from wikimedia.cli.commands import app

# Expose the main app only
__all__ = ["app"]
