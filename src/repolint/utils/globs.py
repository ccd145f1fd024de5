"""Glob classification and matching for repository path specifiers.

Patterns follow shell-glob rules as used in repository tooling:

- ``*`` matches any run of characters within one path segment
- ``?`` matches one character other than ``/``
- ``**`` as a whole segment matches zero or more directories
- ``[abc]`` / ``[!abc]`` character classes
- ``{a,b}`` alternatives, nesting allowed

Dotfiles are matched by wildcards like any other name.
"""

from __future__ import annotations

import functools
import re
from typing import TYPE_CHECKING

from repolint.types import EntryType

if TYPE_CHECKING:
    from repolint.context import RuleContext

GLOB_CHARACTERS = frozenset("*?[]{}")


def is_glob_pattern(specifier: str) -> bool:
    """Return True if the specifier contains any glob metacharacter."""
    return any(ch in GLOB_CHARACTERS for ch in specifier)


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` groups, including nested ones, into plain patterns.

    A brace group without a top-level comma, or an unbalanced brace, is kept
    literally.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        commas: list[int] = []
        for idx in range(start, len(pattern)):
            ch = pattern[idx]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    if not commas:
                        break
                    before = pattern[:start]
                    after = pattern[idx + 1 :]
                    bounds = [start, *commas, idx]
                    expanded: list[str] = []
                    for left, right in zip(bounds, bounds[1:]):
                        option = pattern[left + 1 : right]
                        expanded.extend(expand_braces(f"{before}{option}{after}"))
                    return expanded
            elif ch == "," and depth == 1:
                commas.append(idx)
        start = pattern.find("{", start + 1)
    return [pattern]


def _translate_segment(segment: str) -> str:
    out: list[str] = []
    idx = 0
    length = len(segment)
    while idx < length:
        ch = segment[idx]
        if ch == "*":
            while idx + 1 < length and segment[idx + 1] == "*":
                idx += 1
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            end = idx + 1
            if end < length and segment[end] in "!^":
                end += 1
            if end < length and segment[end] == "]":
                end += 1
            while end < length and segment[end] != "]":
                end += 1
            if end >= length:
                out.append(re.escape(ch))
            else:
                body = segment[idx + 1 : end]
                if body[:1] in ("!", "^"):
                    body = "^" + body[1:]
                body = body.replace("\\", "\\\\").replace("[", "\\[")
                out.append(f"(?!/)[{body}]")
                idx = end
        else:
            out.append(re.escape(ch))
        idx += 1
    return "".join(out)


def _translate(pattern: str) -> str:
    segments = pattern.split("/")
    parts: list[str] = []
    last = len(segments) - 1
    for position, segment in enumerate(segments):
        if segment == "**":
            parts.append(".*" if position == last else "(?:[^/]*/)*")
            continue
        parts.append(_translate_segment(segment))
        if position != last:
            parts.append("/")
    return "".join(parts)


@functools.lru_cache(maxsize=256)
def glob_to_regex(pattern: str, case_sensitive: bool = False) -> re.Pattern[str]:
    """Compile a glob pattern into an anchored regular expression."""
    pattern = pattern.lstrip("/")
    if pattern.startswith("./"):
        pattern = pattern[2:]
    alternatives = [_translate(item) for item in expand_braces(pattern)]
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(r"\A(?:" + "|".join(alternatives) + r")\Z", flags | re.DOTALL)


def matches_glob(path: str, pattern: str, case_sensitive: bool = False) -> bool:
    """Return True if the repo-relative ``path`` matches ``pattern``."""
    return glob_to_regex(pattern, case_sensitive).match(path) is not None


async def find_matching_entries(
    context: RuleContext,
    pattern: str,
    case_sensitive: bool = False,
    entry_type: EntryType = EntryType.FILE,
) -> list[str]:
    """Return paths of snapshot entries of ``entry_type`` matching ``pattern``."""
    regex = glob_to_regex(pattern, case_sensitive)
    entries = await context.all_entries()
    return [
        entry.path
        for entry in entries
        if entry_type.accepts(entry.kind) and regex.match(entry.path) is not None
    ]


async def find_matching_files(context: RuleContext, pattern: str, case_sensitive: bool = False) -> list[str]:
    """Return paths of all files in the repository matching ``pattern``.

    No match is a valid, empty result.
    """
    return await find_matching_entries(context, pattern, case_sensitive, EntryType.FILE)


__all__ = [
    "expand_braces",
    "find_matching_entries",
    "find_matching_files",
    "glob_to_regex",
    "is_glob_pattern",
    "matches_glob",
]
