"""gig — generate .gitignore files from GitHub's template collection."""

from __future__ import annotations

__version__ = "0.3.0"
