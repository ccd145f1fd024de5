"""Rule functions and dispatch by rule identifier."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from repolint.context import RuleContext
from repolint.rules.content import file_contains, file_not_contains
from repolint.rules.dependencies import (
    pyproject_dependencies_alphabetical_order,
    requirements_txt_dependencies_alphabetical_order,
)
from repolint.rules.existence import file_exists, file_forbidden, license_exists, readme_exists
from repolint.rules.options import RuleKind, RuleOptions, parse_options, validate_options
from repolint.rules.workflows import github_actions_timeout_minutes
from repolint.types import RuleResult

RuleFunction = Callable[[RuleContext, Any], Awaitable[RuleResult]]

RULES: dict[RuleKind, RuleFunction] = {
    RuleKind.FILE_CONTAINS: file_contains,
    RuleKind.FILE_EXISTS: file_exists,
    RuleKind.FILE_FORBIDDEN: file_forbidden,
    RuleKind.FILE_NOT_CONTAINS: file_not_contains,
    RuleKind.GITHUB_ACTIONS_TIMEOUT_MINUTES: github_actions_timeout_minutes,
    RuleKind.LICENSE_EXISTS: license_exists,
    RuleKind.PYPROJECT_DEPENDENCIES_ALPHABETICAL_ORDER: pyproject_dependencies_alphabetical_order,
    RuleKind.README_EXISTS: readme_exists,
    RuleKind.REQUIREMENTS_TXT_DEPENDENCIES_ALPHABETICAL_ORDER: requirements_txt_dependencies_alphabetical_order,
}


async def evaluate_rule(
    kind: RuleKind | str,
    context: RuleContext,
    options: RuleOptions | Mapping[str, Any] | None = None,
) -> RuleResult:
    """Run the rule registered for ``kind`` against ``context``.

    Raises:
        UnknownRuleError: If ``kind`` does not name a known rule
        RuleOptionsError: If raw options fail validation
    """
    rule_kind = kind if isinstance(kind, RuleKind) else RuleKind.from_name(kind)
    rule = RULES[rule_kind]
    return await rule(context, options)


__all__ = [
    "RULES",
    "RuleFunction",
    "RuleKind",
    "evaluate_rule",
    "file_contains",
    "file_exists",
    "file_forbidden",
    "file_not_contains",
    "github_actions_timeout_minutes",
    "license_exists",
    "parse_options",
    "pyproject_dependencies_alphabetical_order",
    "readme_exists",
    "requirements_txt_dependencies_alphabetical_order",
    "validate_options",
]
