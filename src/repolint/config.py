"""Load and validate repolint configuration files.

A configuration is an ordered list of rule entries plus optional repository
filters. JSON, YAML and TOML files are accepted; the format is chosen by file
suffix. All validation problems are collected and raised together as a single
``ConfigError``.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from repolint.exceptions import ConfigError, RuleOptionsError, UnknownRuleError
from repolint.rules.options import RuleKind, RuleOptions, parse_options
from repolint.schemas.validator import validate_data
from repolint.types import AlertLevel

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES: tuple[str, ...] = (
    "repolint.json",
    "repolint.yaml",
    "repolint.yml",
    "repolint.toml",
)
WORKSPACE_ENV_VAR = "GITHUB_WORKSPACE"


@dataclass(frozen=True)
class RuleConfig:
    """One configured rule: identifier, alert level, and parsed options."""

    kind: RuleKind
    level: AlertLevel
    options: RuleOptions

    @property
    def name(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class RepositoryFilters:
    """Repository selection filters.

    ``include`` and ``exclude`` are regular expressions searched in both the
    repository name and its ``owner/name`` form; a repository is kept when
    any include pattern matches and no exclude pattern does.
    """

    visibility: str = "all"
    archived: bool | None = None
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    organizations: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RepositoryFilters:
        data = data or {}
        return cls(
            visibility=str(data.get("visibility", "all")),
            archived=data.get("archived"),
            include=tuple(data.get("include", ())),
            exclude=tuple(data.get("exclude", ())),
            organizations=tuple(data.get("organizations", ())),
        )


@dataclass(frozen=True)
class Config:
    rules: tuple[RuleConfig, ...] = ()
    filters: RepositoryFilters = field(default_factory=RepositoryFilters)
    path: Path | None = None


def workspace_root() -> Path:
    """Return the directory searched for configuration files."""
    return Path(os.environ.get(WORKSPACE_ENV_VAR) or Path.cwd())


def discover_config_path(explicit: Path | str | None = None, root: Path | None = None) -> Path:
    """Resolve the configuration file to load.

    Raises:
        ConfigError: If the explicit file is missing or no default file exists
    """
    if explicit is not None:
        path = Path(explicit)
        if not path.is_absolute():
            path = Path.cwd() / path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return path

    search_root = root or workspace_root()
    for name in CONFIG_FILE_NAMES:
        candidate = search_root / name
        if candidate.is_file():
            return candidate
    raise ConfigError(
        f"No config file found in {search_root}. Create one of: {', '.join(CONFIG_FILE_NAMES)}"
    )


def _read_raw_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config {path}: {exc}") from exc

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        if suffix == ".toml":
            return tomllib.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse config {path}: {exc}") from exc
    raise ConfigError(f"Unsupported config format `{suffix}` for {path}")


def _regex_errors(patterns: list[Any], field_name: str) -> list[str]:
    errors: list[str] = []
    for index, pattern in enumerate(patterns):
        try:
            re.compile(pattern)
        except re.error as exc:
            errors.append(f"filters.{field_name}.{index}: Invalid regex pattern `{pattern}`: {exc}")
    return errors


def parse_config(raw: Any, path: Path | None = None) -> Config:
    """Validate a raw configuration mapping and build a ``Config``.

    Raises:
        ConfigError: Listing every schema, rule-name and option problem found
    """
    if raw is None:
        raw = {}
    ok, errors = validate_data(raw, "config")
    if not ok:
        raise ConfigError(_format_problems(path, errors))

    problems: list[str] = []
    rules: list[RuleConfig] = []
    for index, entry in enumerate(raw.get("rules", [])):
        name = entry["name"]
        try:
            kind = RuleKind.from_name(name)
        except UnknownRuleError as exc:
            problems.append(f"rules.{index}: {exc}")
            continue
        try:
            options = parse_options(kind, entry.get("options"))
        except RuleOptionsError as exc:
            problems.extend(f"rules.{index}.options: {message}" for message in exc.errors or [str(exc)])
            continue
        rules.append(RuleConfig(kind=kind, level=AlertLevel(entry["level"]), options=options))

    filters_raw = raw.get("filters") or {}
    problems.extend(_regex_errors(filters_raw.get("include", []), "include"))
    problems.extend(_regex_errors(filters_raw.get("exclude", []), "exclude"))

    if problems:
        raise ConfigError(_format_problems(path, problems))

    return Config(rules=tuple(rules), filters=RepositoryFilters.from_dict(filters_raw), path=path)


def _format_problems(path: Path | None, problems: list[str]) -> str:
    source = str(path) if path is not None else "config"
    return f"Invalid config {source}:\n" + "\n".join(f"  - {problem}" for problem in problems)


def load_config(explicit: Path | str | None = None, root: Path | None = None) -> Config:
    """Discover, read, and validate the configuration file."""
    path = discover_config_path(explicit, root)
    logger.info("Found config at %s", path)
    return parse_config(_read_raw_config(path), path)
