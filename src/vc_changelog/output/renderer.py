"""
Rendering of an organised changelog.

The changelog is rendered either through a Jinja2 template or as JSON.
The rendered text can then be run through the configured line
post-processors, regular expression substitutions applied to each
output line (e.g. to turn issue keys into links).
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import Iterable, List, Pattern, Tuple

from jinja2 import Environment, StrictUndefined, TemplateError

from vc_changelog.config.loader import PostProcessor
from vc_changelog.grouping.group_model import ChangeLog


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class RenderError(Exception):
    """Raised when a template is invalid or fails to render."""

    pass


def tidy(text: str, indent: str = "  ") -> str:
    """Lay out a multi-line change as a list item.

    The first line is trimmed and every following line is indented.
    """
    # Only "\n" and "\r\n" end a line
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if len(lines) > 1 and not lines[-1]:
        lines.pop()
    return "\n".join([lines[0].strip()] + [indent + line for line in lines[1:]])


def _environment() -> Environment:
    env = Environment(
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.filters["tidy"] = tidy
    return env


def check_template(template: str) -> None:
    """Raise :class:`RenderError` if the template has syntax errors."""
    try:
        _environment().parse(template)
    except TemplateError as exc:
        logger.error("Invalid template: %s", exc)
        raise RenderError(f"Invalid template: {exc}") from exc


def render_template(template: str, changelog: ChangeLog) -> str:
    """Render the changelog with a Jinja2 template.

    The template sees the fields of :class:`ChangeLog` (``scopes``,
    ``commits``, ``range``, ``date`` and ``remote_url``) as variables and
    can use the ``tidy`` filter. The result is stripped of surrounding
    whitespace.

    Raises
    ------
    RenderError
        If the template is invalid or rendering fails.
    """
    try:
        compiled = _environment().from_string(template)
        rendered = compiled.render(
            scopes=changelog.scopes,
            commits=changelog.commits,
            range=changelog.range,
            date=changelog.date,
            remote_url=changelog.remote_url,
        )
    except TemplateError as exc:
        logger.error("Template rendering failed: %s", exc)
        raise RenderError(f"Template rendering failed: {exc}") from exc
    return rendered.strip()


def render_json(changelog: ChangeLog) -> str:
    """Render the changelog as pretty-printed JSON.

    Each change carries its ``opening``, ``rest`` and joined ``text``.
    """
    data = dataclasses.asdict(changelog)
    for scope, scope_data in zip(changelog.scopes, data["scopes"]):
        for category, category_data in zip(scope.categories, scope_data["categories"]):
            for change, change_data in zip(category.changes, category_data["changes"]):
                change_data["text"] = change.text
    return json.dumps(data, indent=2)


# "$name", "${name}" and "$1" style group references; "$$" is a literal "$"
_GROUP_REFERENCE = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\w+))")


def _translate_reference(match: re.Match) -> str:
    if match.group(1):
        # "$$" is a literal dollar sign
        return "$"
    return "\\g<" + (match.group(2) or match.group(3)) + ">"


def _replacement(replace: str) -> str:
    """Translate ``$group`` references to the :func:`re.sub` syntax."""
    escaped = replace.replace("\\", "\\\\")
    return _GROUP_REFERENCE.sub(_translate_reference, escaped)


def compile_processors(processors: Iterable[PostProcessor]) -> List[Tuple[Pattern[str], str]]:
    """Compile the post-processors, skipping those with invalid lookups."""
    compiled = []
    for processor in processors:
        try:
            lookup = re.compile(processor.lookup)
        except re.error as exc:
            logger.warning("Post-processor %r is invalid: %s", processor, exc)
            continue
        logger.info("Using post-processor %r", processor.lookup)
        compiled.append((lookup, _replacement(processor.replace)))
    return compiled


def postprocess(processors: Iterable[PostProcessor], output: str) -> str:
    """Apply the post-processors to each line of the output."""
    compiled = compile_processors(processors)
    processed = []
    for line in output.splitlines():
        for lookup, replace in compiled:
            try:
                line = lookup.sub(replace, line)
            except (re.error, IndexError) as exc:
                logger.warning("Post-processor %r failed: %s", lookup.pattern, exc)
        processed.append(line)
    return "\n".join(processed)
