"""Alphabetical-order rules for Python dependency manifests."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from typing import Any

from repolint.context import RuleContext
from repolint.exceptions import ContentError
from repolint.rules.options import (
    PyprojectDependenciesAlphabeticalOrderOptions,
    RequirementsTxtDependenciesAlphabeticalOrderOptions,
    RuleKind,
    coerce_options,
)
from repolint.types import RuleResult
from repolint.utils.dependencies import check_alphabetical_order, parse_requirements_file

POETRY_PYTHON_KEY = "python"


def _get_nested(data: Any, dotted: str) -> Any:
    current = data
    for part in dotted.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _poetry_key(name: str) -> str:
    return name.lower()


def check_section(path: str, section: str, value: Any) -> list[str]:
    """Check one manifest section, choosing the check by the section's shape.

    - list of specifiers: ``project.dependencies`` style
    - mapping of group name to list: ``project.optional-dependencies`` style
    - any other mapping: Poetry style, package names are the keys
    """
    location = f"{path}:{section}"

    if isinstance(value, list):
        if _is_string_list(value) and value:
            return check_alphabetical_order(value, location)
        return []

    if not isinstance(value, dict):
        return []

    if all(isinstance(group, list) for group in value.values()):
        errors: list[str] = []
        for group_name, group in value.items():
            if _is_string_list(group) and group:
                errors.extend(check_alphabetical_order(group, f"{location}.{group_name}"))
        return errors

    names = [name for name in value if name != POETRY_PYTHON_KEY]
    if not names:
        return []
    return check_alphabetical_order(names, location, key=_poetry_key)


async def pyproject_dependencies_alphabetical_order(
    context: RuleContext,
    options: PyprojectDependenciesAlphabeticalOrderOptions | Mapping[str, Any] | None = None,
) -> RuleResult:
    """Require dependency lists in ``pyproject.toml`` to be sorted by package name."""
    opts: PyprojectDependenciesAlphabeticalOrderOptions = coerce_options(
        RuleKind.PYPROJECT_DEPENDENCIES_ALPHABETICAL_ORDER,
        options,
        PyprojectDependenciesAlphabeticalOrderOptions,
    )

    try:
        content = await context.read_file(opts.path)
    except ContentError as exc:
        return RuleResult(errors=[f"{opts.path}: {exc}"])

    try:
        pyproject = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        return RuleResult(errors=[f"{opts.path}: failed to parse TOML: {exc}"])

    errors: list[str] = []
    for section in opts.sections:
        value = _get_nested(pyproject, section)
        if value is None:
            continue
        errors.extend(check_section(opts.path, section, value))
    return RuleResult(errors=errors)


async def requirements_txt_dependencies_alphabetical_order(
    context: RuleContext,
    options: RequirementsTxtDependenciesAlphabeticalOrderOptions | Mapping[str, Any] | None = None,
) -> RuleResult:
    """Require ``requirements.txt`` entries to be sorted by package name."""
    opts: RequirementsTxtDependenciesAlphabeticalOrderOptions = coerce_options(
        RuleKind.REQUIREMENTS_TXT_DEPENDENCIES_ALPHABETICAL_ORDER,
        options,
        RequirementsTxtDependenciesAlphabeticalOrderOptions,
    )

    try:
        content = await context.read_file(opts.path)
    except ContentError as exc:
        return RuleResult(errors=[f"{opts.path}: {exc}"])

    dependencies = parse_requirements_file(content)
    return RuleResult(errors=check_alphabetical_order(dependencies, opts.path))
