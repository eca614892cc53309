"""
Configuration loader for vc_changelog.

The tool reads its configuration from a YAML file named ``.changelog.yml``.
Unless a file is given explicitly, the loader looks for one in the start
directory and each of its parents up to the filesystem root. When none
is found, the default configuration embedded in this package is used.

The configuration defines the project conventions (the scope and
category keywords recognised in commit messages) and the output
preferences. If a file is unreadable, malformed, or has fields of the
wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings when the CLI has
# not configured logging. Records still propagate to the root logger.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


CONFIG_FILE = ".changelog.yml"
TEMPLATE_FILE = ".changelog.j2"
DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_REMOTE = "origin"


class ConfigError(Exception):
    """Raised when the configuration or template file is missing or invalid."""

    pass


@dataclass
class Keyword:
    """A tag recognised in commit messages and its report title."""

    tag: str
    title: str


@dataclass
class Conventions:
    """The scope and category vocabularies of a project.

    A line without a scope (or category) tag is looked up with the
    vocabulary's default tag, ``""`` unless configured otherwise.
    """

    scopes: List[Keyword] = field(default_factory=list)
    categories: List[Keyword] = field(default_factory=list)
    default_scope: str = ""
    default_category: str = ""

    def scope_title(self, tag: Optional[str]) -> Optional[str]:
        return self._title(self.scopes, tag, self.default_scope)

    def category_title(self, tag: Optional[str]) -> Optional[str]:
        return self._title(self.categories, tag, self.default_category)

    def scope_titles(self) -> List[str]:
        return self._titles(self.scopes)

    def category_titles(self) -> List[str]:
        return self._titles(self.categories)

    @staticmethod
    def _title(keywords: List[Keyword], tag: Optional[str], default: str) -> Optional[str]:
        # An empty vocabulary still accepts untagged lines, with a blank title
        if not keywords and tag is None:
            return ""

        given = default if tag is None else tag
        for keyword in keywords:
            if keyword.tag == given:
                return keyword.title
        return None

    @staticmethod
    def _titles(keywords: List[Keyword]) -> List[str]:
        if not keywords:
            return [""]
        return [keyword.title for keyword in keywords]


@dataclass
class PostProcessor:
    """A regular expression substitution applied to each output line."""

    lookup: str
    replace: str


@dataclass
class OutputPreferences:
    """How the changelog is rendered."""

    json: bool = False
    template: Optional[str] = None
    remote: str = DEFAULT_REMOTE
    post_processors: List[PostProcessor] = field(default_factory=list)


@dataclass
class Configuration:
    """The complete tool configuration."""

    conventions: Conventions = field(default_factory=Conventions)
    output: OutputPreferences = field(default_factory=OutputPreferences)
    date_format: str = DEFAULT_DATE_FORMAT


# ----------------------------------------------------------------------
# File discovery
# ----------------------------------------------------------------------
def find_file(start: Path, name: str) -> Optional[Path]:
    """Find ``name`` in ``start`` or the closest of its parent directories."""
    current = start.resolve()
    while True:
        candidate = current / name
        if candidate.is_file():
            return candidate
        if current.parent == current:
            # reached filesystem root
            return None
        current = current.parent


def _read_text(path: Path) -> str:
    logger.info("Reading file '%s'", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Cannot read file '%s': %s", path, exc)
        raise ConfigError(f"Cannot read file '{path}': {exc}") from exc


def _default_text(name: str) -> str:
    return resources.files("vc_changelog").joinpath("assets").joinpath(name).read_text(encoding="utf-8")


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------
def _expect(value: Any, kind: type, name: str) -> Any:
    if not isinstance(value, kind):
        raise ConfigError(f"'{name}' must be a {kind.__name__}")
    return value


def _keywords(data: Any, name: str) -> List[Keyword]:
    keywords = []
    for index, item in enumerate(_expect(data, list, name)):
        entry = f"{name}[{index}]"
        _expect(item, dict, entry)
        tag = item.get("tag", "")
        title = item.get("title", "")
        # YAML reads unquoted numbers and empty values as non-strings
        if tag is None:
            tag = ""
        if isinstance(tag, int) and not isinstance(tag, bool):
            tag = str(tag)
        _expect(tag, str, f"{entry}.tag")
        _expect(title, str, f"{entry}.title")
        keywords.append(Keyword(tag=tag.strip().lower(), title=title))
    return keywords


def _conventions(data: Dict[str, Any]) -> Conventions:
    return Conventions(
        scopes=_keywords(data.get("scopes", []), "conventions.scopes"),
        categories=_keywords(data.get("categories", []), "conventions.categories"),
        default_scope=_expect(data.get("default_scope", ""), str, "conventions.default_scope").lower(),
        default_category=_expect(
            data.get("default_category", ""), str, "conventions.default_category"
        ).lower(),
    )


def _output(data: Dict[str, Any]) -> OutputPreferences:
    processors = []
    for index, item in enumerate(_expect(data.get("post_processors", []), list, "output.post_processors")):
        entry = f"output.post_processors[{index}]"
        _expect(item, dict, entry)
        processors.append(
            PostProcessor(
                lookup=_expect(item.get("lookup", ""), str, f"{entry}.lookup"),
                replace=_expect(item.get("replace", ""), str, f"{entry}.replace"),
            )
        )

    template = data.get("template")
    if template is not None:
        _expect(template, str, "output.template")

    return OutputPreferences(
        json=_expect(data.get("json", False), bool, "output.json"),
        template=template,
        remote=_expect(data.get("remote", DEFAULT_REMOTE), str, "output.remote"),
        post_processors=processors,
    )


def parse_config(text: str, source: str = "<string>") -> Configuration:
    """Build a :class:`Configuration` from YAML text.

    Raises
    ------
    ConfigError
        If the YAML is invalid, empty, or has fields of the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.error("Invalid YAML in configuration '%s': %s", source, exc)
        raise ConfigError(f"Configuration '{source}' contains invalid YAML: {exc}") from exc

    if data is None:
        raise ConfigError(f"Configuration '{source}' is empty")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration '{source}' must be a mapping")

    try:
        config = Configuration(
            conventions=_conventions(_expect(data.get("conventions", {}) or {}, dict, "conventions")),
            output=_output(_expect(data.get("output", {}) or {}, dict, "output")),
            date_format=_expect(data.get("date_format") or DEFAULT_DATE_FORMAT, str, "date_format"),
        )
    except ConfigError as exc:
        logger.error("Invalid configuration '%s': %s", source, exc)
        raise ConfigError(f"Invalid configuration '{source}': {exc}") from exc

    logger.debug("Configuration from %s: %s", source, config)
    return config


def load_config(path: Optional[Path] = None, start_dir: Optional[Path] = None) -> Configuration:
    """Load the configuration and return it.

    Args:
        path: An explicit configuration file. When ``None`` the closest
              ``.changelog.yml`` from ``start_dir`` upwards is used.
        start_dir: Where discovery starts, the current directory by default.

    Returns:
        The validated configuration. The embedded default is returned when
        no file is given or found.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    if path is None:
        path = find_file(start_dir or Path.cwd(), CONFIG_FILE)

    if path is None:
        logger.info("No %s found, using the default configuration", CONFIG_FILE)
        return parse_config(_default_text("changelog.yml"), "embedded")

    return parse_config(_read_text(Path(path)), str(path))


def load_template(
    path: Optional[Path] = None,
    start_dir: Optional[Path] = None,
    config: Optional[Configuration] = None,
) -> str:
    """Return the changelog template text.

    The template is taken from ``path``, then from the configured
    ``output.template``, then from the closest ``.changelog.j2``, and
    finally from the default template embedded in this package.

    Raises
    ------
    ConfigError
        If the chosen template file cannot be read.
    """
    if path is None and config is not None and config.output.template:
        path = Path(config.output.template)
    if path is None:
        path = find_file(start_dir or Path.cwd(), TEMPLATE_FILE)

    if path is None:
        logger.info("No %s found, using the default template", TEMPLATE_FILE)
        return _default_text("changelog.j2")

    return _read_text(Path(path))
