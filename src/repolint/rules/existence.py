"""Existence rules: required and forbidden repository entries."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from repolint.context import RuleContext, split_path
from repolint.exceptions import ContentError
from repolint.rules.options import FileExistsOptions, FileForbiddenOptions, RuleKind, coerce_options
from repolint.types import DirectoryEntry, EntryType, RuleResult
from repolint.utils.globs import find_matching_entries, is_glob_pattern

logger = logging.getLogger(__name__)


def _names_equal(left: str, right: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return left == right
    return left.casefold() == right.casefold()


async def find_literal_entry(
    context: RuleContext,
    entry_path: str,
    case_sensitive: bool,
    entry_type: EntryType,
) -> DirectoryEntry | None:
    """Look up a literal path in its parent directory listing.

    A parent directory that cannot be listed means the entry is absent.
    """
    parent, name = split_path(entry_path)
    try:
        listing = await context.list_directory(parent)
    except ContentError as exc:
        logger.debug("Treating %s as absent: %s", entry_path, exc)
        return None

    for entry in listing:
        if entry_type.accepts(entry.kind) and _names_equal(entry.name, name, case_sensitive):
            return entry
    return None


async def _specifier_matches(
    context: RuleContext,
    specifier: str,
    case_sensitive: bool,
    entry_type: EntryType,
) -> list[str]:
    if is_glob_pattern(specifier):
        return await find_matching_entries(context, specifier, case_sensitive, entry_type)
    entry = await find_literal_entry(context, specifier, case_sensitive, entry_type)
    return [specifier] if entry is not None else []


async def file_exists(
    context: RuleContext,
    options: FileExistsOptions | Mapping[str, Any],
    kind: RuleKind = RuleKind.FILE_EXISTS,
) -> RuleResult:
    """Pass as soon as any of the configured specifiers resolves to an entry."""
    opts: FileExistsOptions = coerce_options(kind, options, FileExistsOptions)

    for specifier in opts.paths:
        if await _specifier_matches(context, specifier, opts.case_sensitive, opts.type):
            return RuleResult()

    display = opts.paths[0] if len(opts.paths) == 1 else f"one of [{', '.join(opts.paths)}]"
    return RuleResult(errors=[f"{display} not found"])


async def file_forbidden(
    context: RuleContext,
    options: FileForbiddenOptions | Mapping[str, Any],
) -> RuleResult:
    """Report every configured specifier that resolves to an existing entry.

    All offending paths are combined into a single error.
    """
    opts: FileForbiddenOptions = coerce_options(RuleKind.FILE_FORBIDDEN, options, FileForbiddenOptions)

    found: list[str] = []
    for specifier in opts.paths:
        for path in await _specifier_matches(context, specifier, opts.case_sensitive, opts.type):
            if path not in found:
                found.append(path)

    if not found:
        return RuleResult()

    display = found[0] if len(found) == 1 else f"[{', '.join(found)}]"
    return RuleResult(errors=[f"{display} should not exist"])


async def readme_exists(context: RuleContext, options: FileExistsOptions | Mapping[str, Any] | None = None) -> RuleResult:
    return await file_exists(context, options if options is not None else {}, RuleKind.README_EXISTS)


async def license_exists(context: RuleContext, options: FileExistsOptions | Mapping[str, Any] | None = None) -> RuleResult:
    return await file_exists(context, options if options is not None else {}, RuleKind.LICENSE_EXISTS)
