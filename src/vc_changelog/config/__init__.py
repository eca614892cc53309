"""
Configuration loading for vc_changelog.

Provides the ``.changelog.yml`` loader and the configuration data
model. See :mod:`vc_changelog.config.loader` for implementation details.
"""

from .loader import Configuration, ConfigError, Conventions, Keyword, load_config, load_template  # noqa: F401
