"""Top-level package for the studieasy workspace browser.

The package turns a user-granted directory capability into a browsable grid
of entries with icons and generated thumbnails.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
