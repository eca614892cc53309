"""
Changelog rendering: Jinja2 templates, JSON and line post-processing.
"""

from .renderer import RenderError, postprocess, render_json, render_template  # noqa: F401
