"""
Container Installer - dependency-ordered container factory discovery

Collects the container factories that installed packages declare in their
``extra.container-interop`` metadata, orders them by package dependencies and
regenerates the project's containers module while preserving user edits.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
