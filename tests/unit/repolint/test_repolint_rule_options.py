"""Unit tests for rule option parsing and dispatch by rule identifier."""

from __future__ import annotations

import pytest

from repolint.exceptions import RuleOptionsError, UnknownRuleError
from repolint.rules import RULES, RuleKind, evaluate_rule
from repolint.rules.options import (
    DEFAULT_PYPROJECT_SECTIONS,
    FileContainsOptions,
    FileExistsOptions,
    GithubActionsTimeoutMinutesOptions,
    PathOptions,
    PyprojectDependenciesAlphabeticalOrderOptions,
    RequirementsTxtDependenciesAlphabeticalOrderOptions,
    parse_options,
    validate_options,
)
from repolint.types import EntryType
from tests.unit.repolint.rule_test_utils import make_context, run


def test_every_rule_kind_is_registered() -> None:
    assert set(RULES) == set(RuleKind)


def test_rule_kind_from_name() -> None:
    assert RuleKind.from_name("readme/exists") is RuleKind.README_EXISTS
    with pytest.raises(UnknownRuleError, match="Rule no-such-rule not found"):
        RuleKind.from_name("no-such-rule")


def test_schema_names_are_packaged_for_every_rule() -> None:
    for kind in RuleKind:
        ok, errors = validate_options(kind, {})
        assert ok is (not errors)


def test_validate_options_returns_errors_without_raising() -> None:
    ok, errors = validate_options(RuleKind.FILE_EXISTS, {"path": "README.md", "caseSensitive": "yes"})

    assert not ok
    assert errors and errors[0].startswith("caseSensitive: ")


def test_parse_options_fills_defaults() -> None:
    assert parse_options(RuleKind.FILE_EXISTS, {"path": "README.md"}) == FileExistsOptions(
        paths=("README.md",), case_sensitive=False, type=EntryType.FILE
    )
    assert parse_options(RuleKind.README_EXISTS, None) == FileExistsOptions(paths=("README.md",))
    assert parse_options(RuleKind.LICENSE_EXISTS, {}) == FileExistsOptions(paths=("LICENSE.md",))
    assert parse_options(RuleKind.GITHUB_ACTIONS_TIMEOUT_MINUTES, None) == GithubActionsTimeoutMinutesOptions()
    assert parse_options(
        RuleKind.PYPROJECT_DEPENDENCIES_ALPHABETICAL_ORDER, {}
    ) == PyprojectDependenciesAlphabeticalOrderOptions(path="pyproject.toml", sections=DEFAULT_PYPROJECT_SECTIONS)
    assert parse_options(
        RuleKind.REQUIREMENTS_TXT_DEPENDENCIES_ALPHABETICAL_ORDER, None
    ) == RequirementsTxtDependenciesAlphabeticalOrderOptions(path="requirements.txt")


def test_parse_options_keeps_alternatives_in_order() -> None:
    options = parse_options(
        RuleKind.FILE_CONTAINS,
        {"path": ["b.md", "a.md"], "contains": "x", "caseSensitive": True},
    )

    assert options == FileContainsOptions(paths=("b.md", "a.md"), case_sensitive=True, contains="x")


def test_parse_options_rejects_invalid_options() -> None:
    with pytest.raises(RuleOptionsError, match="Invalid rule options") as excinfo:
        parse_options(RuleKind.FILE_FORBIDDEN, {"path": "x", "extra": 1})

    assert excinfo.value.errors
    assert isinstance(excinfo.value, ValueError)


def test_path_options_require_at_least_one_path() -> None:
    with pytest.raises(RuleOptionsError):
        PathOptions(paths=())


def test_evaluate_rule_dispatches_by_name() -> None:
    context, _ = make_context({"README.md": "# hi"})

    assert run(evaluate_rule("readme/exists", context)).errors == []
    assert run(evaluate_rule(RuleKind.LICENSE_EXISTS, context)).errors == ["LICENSE.md not found"]


def test_evaluate_rule_rejects_unknown_names_and_bad_options() -> None:
    context, _ = make_context()

    with pytest.raises(UnknownRuleError):
        run(evaluate_rule("unknown/rule", context, {}))
    with pytest.raises(RuleOptionsError):
        run(evaluate_rule(RuleKind.FILE_EXISTS, context, None))


def test_rule_rejects_options_of_another_rule() -> None:
    context, _ = make_context()

    with pytest.raises(RuleOptionsError, match="expected FileContainsOptions"):
        run(evaluate_rule(RuleKind.FILE_CONTAINS, context, GithubActionsTimeoutMinutesOptions(maximum=5)))
