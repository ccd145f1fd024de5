"""Content rules: files must (or must not) contain a literal string."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from repolint.context import RuleContext
from repolint.exceptions import ContentError
from repolint.rules.options import FileContainsOptions, FileNotContainsOptions, RuleKind, coerce_options
from repolint.types import RuleResult
from repolint.utils.globs import find_matching_files, is_glob_pattern


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


async def _scan_files(
    context: RuleContext,
    paths: tuple[str, ...],
    contains: str,
    case_sensitive: bool,
    *,
    expect_present: bool,
) -> list[str]:
    errors: list[str] = []
    needle = _fold(contains, case_sensitive)

    for specifier in paths:
        if is_glob_pattern(specifier):
            files_to_check = await find_matching_files(context, specifier, case_sensitive)
            if not files_to_check:
                if expect_present:
                    errors.append(f"{specifier}: no files match pattern")
                continue
        else:
            files_to_check = [specifier]

        for file_path in files_to_check:
            try:
                text = await context.read_file(file_path)
            except ContentError as exc:
                errors.append(f"{file_path}: {exc}")
                continue

            present = needle in _fold(text, case_sensitive)
            if expect_present and not present:
                errors.append(f'{file_path}: file does not contain "{contains}"')
            elif not expect_present and present:
                errors.append(f'{file_path}: file contains "{contains}"')

    return errors


async def file_contains(context: RuleContext, options: FileContainsOptions | Mapping[str, Any]) -> RuleResult:
    """Every resolved file must contain ``contains``.

    A glob that matches no files is itself an error.
    """
    opts: FileContainsOptions = coerce_options(RuleKind.FILE_CONTAINS, options, FileContainsOptions)
    errors = await _scan_files(context, opts.paths, opts.contains, opts.case_sensitive, expect_present=True)
    return RuleResult(errors=errors)


async def file_not_contains(
    context: RuleContext,
    options: FileNotContainsOptions | Mapping[str, Any],
) -> RuleResult:
    """No resolved file may contain ``contains``; unmatched globs pass."""
    opts: FileNotContainsOptions = coerce_options(RuleKind.FILE_NOT_CONTAINS, options, FileNotContainsOptions)
    errors = await _scan_files(context, opts.paths, opts.contains, opts.case_sensitive, expect_present=False)
    return RuleResult(errors=errors)
