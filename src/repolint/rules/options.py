"""Rule identifiers and per-rule option structures.

Options arrive from configuration files as plain mappings using the
configuration spelling (``caseSensitive``). ``validate_options`` checks them
against the packaged JSON schema without raising; ``parse_options`` fills in
defaults and returns the frozen option dataclass for the rule.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from repolint.exceptions import RuleOptionsError, UnknownRuleError
from repolint.schemas.validator import validate_data
from repolint.types import EntryType

DEFAULT_README_PATH = "README.md"
DEFAULT_LICENSE_PATH = "LICENSE.md"
DEFAULT_PYPROJECT_PATH = "pyproject.toml"
DEFAULT_REQUIREMENTS_PATH = "requirements.txt"
DEFAULT_PYPROJECT_SECTIONS: tuple[str, ...] = (
    "project.dependencies",
    "project.optional-dependencies",
    "tool.poetry.dependencies",
)


class RuleKind(str, Enum):
    """Closed set of rule identifiers accepted in configuration."""

    FILE_CONTAINS = "file-contains"
    FILE_EXISTS = "file-exists"
    FILE_FORBIDDEN = "file-forbidden"
    FILE_NOT_CONTAINS = "file-not-contains"
    GITHUB_ACTIONS_TIMEOUT_MINUTES = "github-actions/timeout-minutes"
    LICENSE_EXISTS = "license/exists"
    PYPROJECT_DEPENDENCIES_ALPHABETICAL_ORDER = "python/pyproject-dependencies-alphabetical-order"
    README_EXISTS = "readme/exists"
    REQUIREMENTS_TXT_DEPENDENCIES_ALPHABETICAL_ORDER = "python/requirements-txt-dependencies-alphabetical-order"

    @classmethod
    def from_name(cls, name: str) -> RuleKind:
        try:
            return cls(name)
        except ValueError:
            raise UnknownRuleError(name) from None

    @property
    def schema_name(self) -> str:
        """Name of the packaged options schema for this rule."""
        return self.value.removeprefix("python/").replace("/", "_").replace("-", "_")


def _as_paths(value: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class PathOptions:
    """Options shared by every rule that takes one or more path specifiers."""

    paths: tuple[str, ...]
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not self.paths:
            raise RuleOptionsError("Invalid rule options: path must not be empty")


@dataclass(frozen=True)
class FileExistsOptions(PathOptions):
    type: EntryType = EntryType.FILE


@dataclass(frozen=True)
class FileForbiddenOptions(PathOptions):
    type: EntryType = EntryType.FILE


@dataclass(frozen=True)
class FileContainsOptions(PathOptions):
    contains: str = ""


@dataclass(frozen=True)
class FileNotContainsOptions(PathOptions):
    contains: str = ""


@dataclass(frozen=True)
class GithubActionsTimeoutMinutesOptions:
    maximum: float | None = None


@dataclass(frozen=True)
class PyprojectDependenciesAlphabeticalOrderOptions:
    path: str = DEFAULT_PYPROJECT_PATH
    sections: tuple[str, ...] = DEFAULT_PYPROJECT_SECTIONS


@dataclass(frozen=True)
class RequirementsTxtDependenciesAlphabeticalOrderOptions:
    path: str = DEFAULT_REQUIREMENTS_PATH


RuleOptions = (
    FileExistsOptions
    | FileForbiddenOptions
    | FileContainsOptions
    | FileNotContainsOptions
    | GithubActionsTimeoutMinutesOptions
    | PyprojectDependenciesAlphabeticalOrderOptions
    | RequirementsTxtDependenciesAlphabeticalOrderOptions
)


def validate_options(kind: RuleKind, raw: Mapping[str, Any] | None) -> tuple[bool, list[str]]:
    """Validate raw options for ``kind``; returns (is_valid, error_messages)."""
    data = dict(raw or {})
    return validate_data(data, kind.schema_name)


def parse_options(kind: RuleKind, raw: Mapping[str, Any] | None) -> RuleOptions:
    """Validate raw options and build the option dataclass with defaults.

    Raises:
        RuleOptionsError: If the options do not match the rule's schema
    """
    data = dict(raw or {})
    ok, errors = validate_options(kind, data)
    if not ok:
        raise RuleOptionsError(f"Invalid rule options: {'; '.join(errors)}", errors)

    case_sensitive = bool(data.get("caseSensitive", False))

    if kind is RuleKind.FILE_EXISTS:
        return FileExistsOptions(
            paths=_as_paths(data["path"]),
            case_sensitive=case_sensitive,
            type=EntryType(data.get("type", EntryType.FILE.value)),
        )
    if kind is RuleKind.FILE_FORBIDDEN:
        return FileForbiddenOptions(
            paths=_as_paths(data["path"]),
            case_sensitive=case_sensitive,
            type=EntryType(data.get("type", EntryType.FILE.value)),
        )
    if kind is RuleKind.README_EXISTS:
        return FileExistsOptions(paths=_as_paths(data.get("path", DEFAULT_README_PATH)), case_sensitive=case_sensitive)
    if kind is RuleKind.LICENSE_EXISTS:
        return FileExistsOptions(paths=_as_paths(data.get("path", DEFAULT_LICENSE_PATH)), case_sensitive=case_sensitive)
    if kind is RuleKind.FILE_CONTAINS:
        return FileContainsOptions(
            paths=_as_paths(data["path"]),
            case_sensitive=case_sensitive,
            contains=data["contains"],
        )
    if kind is RuleKind.FILE_NOT_CONTAINS:
        return FileNotContainsOptions(
            paths=_as_paths(data["path"]),
            case_sensitive=case_sensitive,
            contains=data["contains"],
        )
    if kind is RuleKind.GITHUB_ACTIONS_TIMEOUT_MINUTES:
        return GithubActionsTimeoutMinutesOptions(maximum=data.get("maximum"))
    if kind is RuleKind.PYPROJECT_DEPENDENCIES_ALPHABETICAL_ORDER:
        return PyprojectDependenciesAlphabeticalOrderOptions(
            path=data.get("path", DEFAULT_PYPROJECT_PATH),
            sections=tuple(data.get("sections", DEFAULT_PYPROJECT_SECTIONS)),
        )
    if kind is RuleKind.REQUIREMENTS_TXT_DEPENDENCIES_ALPHABETICAL_ORDER:
        return RequirementsTxtDependenciesAlphabeticalOrderOptions(
            path=data.get("path", DEFAULT_REQUIREMENTS_PATH),
        )
    raise UnknownRuleError(kind.value)


def coerce_options(
    kind: RuleKind,
    options: RuleOptions | Mapping[str, Any] | None,
    expected: type,
) -> Any:
    """Return ``options`` as an ``expected`` instance, parsing mappings first."""
    if isinstance(options, expected):
        return options
    if options is None or isinstance(options, Mapping):
        parsed = parse_options(kind, options)
        if isinstance(parsed, expected):
            return parsed
    raise RuleOptionsError(
        f"Invalid rule options: expected {expected.__name__} or a mapping for {kind.value}, "
        f"got {type(options).__name__}"
    )
