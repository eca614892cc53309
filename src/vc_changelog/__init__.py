"""
Top-level package for vc_changelog.

vc_changelog builds a changelog from tagged lines in Git commit
messages. The main CLI entry point lives in :mod:`vc_changelog.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.4.0"
