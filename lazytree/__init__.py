"""lazytree: a terminal directory browser with highlighted file previews.

Only ``main`` and the version live here; the tree model, renderer and
session are in submodules and are imported on first use.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(*args, **kwargs):
    """Run the command-line entrypoint without importing it at package import."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["__version__", "main"]
