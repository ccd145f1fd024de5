"""Python dependency specifier parsing and ordering checks."""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Sequence

from pyuca import Collator  # type: ignore[import-untyped]

EDITABLE_PREFIX = "-e "
VCS_MARKER = "git+"

_EGG_RE = re.compile(r"#egg=([a-zA-Z0-9_-]+)")
_HOSTED_REPO_RE = re.compile(r"(?:github\.com|gitlab\.com|bitbucket\.org)[/:]([^/]+)/([^/]+?)(?:\.git|[@#?]|$)")
_STANDARD_NAME_RE = re.compile(r"^([a-zA-Z0-9_-]+(?:\[[^\]]+\])?)")
_PATH_SEPARATOR_RE = re.compile(r"[/\\]")


def _is_local_path(value: str) -> bool:
    return value.startswith(".") or value.startswith("/")


def _last_path_segment(value: str) -> str:
    return _PATH_SEPARATOR_RE.split(value)[-1].lower()


def _name_from_vcs_url(url: str) -> str:
    egg = _EGG_RE.search(url)
    if egg:
        return egg.group(1).lower()

    hosted = _HOSTED_REPO_RE.search(url)
    if hosted:
        return hosted.group(2).lower()

    return url.lower()


def get_dependency_name(line: str) -> str:
    """Canonicalize a raw dependency specifier into a lowercase sort key.

    Handles editable installs (``-e ./pkg``), VCS URLs (``git+https://...``,
    preferring ``#egg=`` names), local paths, and standard specifiers where
    the name and any extras bracket form the key (``black[dev]>=23`` yields
    ``black[dev]``).
    """
    trimmed = line.strip()

    if trimmed.startswith(EDITABLE_PREFIX):
        rest = trimmed[len(EDITABLE_PREFIX) :].strip()
        if _is_local_path(rest):
            return _last_path_segment(rest)
        return _name_from_vcs_url(rest)

    if VCS_MARKER in trimmed:
        return _name_from_vcs_url(trimmed)

    if _is_local_path(trimmed):
        return _last_path_segment(trimmed)

    match = _STANDARD_NAME_RE.match(trimmed)
    return match.group(1).lower() if match else trimmed.lower()


def parse_requirements_file(content: str) -> list[str]:
    """Extract dependency lines from requirements.txt content.

    Blank lines and comment-only lines are dropped, trailing inline comments
    are stripped, and declaration order is preserved.
    """
    dependencies: list[str] = []
    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        comment_index = trimmed.find("#")
        if comment_index >= 0:
            trimmed = trimmed[:comment_index].strip()
        if trimmed:
            dependencies.append(trimmed)
    return dependencies


@functools.lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def _sort_key(value: str) -> tuple[int, ...]:
    return tuple(_collator().sort_key(value.casefold()))


def find_first_misordered(
    items: Sequence[str],
    key: Callable[[str], str] = get_dependency_name,
) -> tuple[str, str] | None:
    """Return (expected, found) at the first position that breaks ordering.

    ``items`` are stably sorted by ``key`` under case-insensitive Unicode collation
    (punctuation before digits, digits before letters); the
    original and sorted sequences are then compared position by position.
    Returns None when the sequence is already ordered.
    """
    ordered = sorted(items, key=lambda item: _sort_key(key(item)))
    for actual, expected in zip(items, ordered):
        if actual != expected:
            return expected, actual
    return None


def check_alphabetical_order(
    items: Sequence[str],
    location: str,
    key: Callable[[str], str] = get_dependency_name,
) -> list[str]:
    """Check ordering of one dependency list; at most one error is returned."""
    mismatch = find_first_misordered(items, key)
    if mismatch is None:
        return []
    expected, actual = mismatch
    return [
        f'{location}: dependencies are not in alphabetical order. Expected "{expected}" but found "{actual}"'
    ]
