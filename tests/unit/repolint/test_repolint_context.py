"""Unit tests for RuleContext caching and traversal."""

from __future__ import annotations

import pytest

from repolint.context import RuleContext, normalize_path, split_path
from repolint.exceptions import ContentNotFoundError, NotADirectoryContentError, NotAFileContentError
from repolint.types import DirectoryEntry, EntryKind, RepositoryRef
from tests.unit.repolint.rule_test_utils import make_context, run


def test_normalize_path_maps_root_spellings_to_empty() -> None:
    assert normalize_path("") == ""
    assert normalize_path(".") == ""
    assert normalize_path("/") == ""
    assert normalize_path("./docs/") == "docs"
    assert normalize_path("a//b/../c") == "a/c"


def test_split_path_returns_parent_and_name() -> None:
    assert split_path("README.md") == ("", "README.md")
    assert split_path("docs/guide/intro.md") == ("docs/guide", "intro.md")


def test_read_file_twice_issues_one_client_call() -> None:
    context, client = make_context({"README.md": "# hello\n"})

    first = run(context.read_file("README.md"))
    second = run(context.read_file("README.md"))

    assert first == second == "# hello\n"
    assert client.calls_for("README.md") == 1


def test_list_directory_twice_issues_one_client_call() -> None:
    context, client = make_context({"docs/a.md": "a", "docs/b.md": "b"})

    async def _twice() -> list[DirectoryEntry]:
        await context.list_directory("docs")
        return await context.list_directory("docs")

    entries = run(_twice())

    assert [entry.path for entry in entries] == ["docs/a.md", "docs/b.md"]
    assert client.calls_for("docs") == 1


def test_read_file_reuses_content_fetched_for_listing_lookup() -> None:
    context, client = make_context({"setup.cfg": "[metadata]\n"})

    async def _fetch_then_read() -> str:
        await context.get_content("setup.cfg")
        return await context.read_file("setup.cfg")

    assert run(_fetch_then_read()) == "[metadata]\n"
    assert client.calls_for("setup.cfg") == 1


def test_caches_are_namespaced_by_repository() -> None:
    context, client = make_context({"README.md": "x"})
    other = RuleContext(client, RepositoryRef(owner="other", name="repo"))

    async def _read_both() -> None:
        await context.read_file("README.md")
        await other.read_file("README.md")

    run(_read_both())
    assert client.calls == [
        ("test-owner", "test-repo", "README.md"),
        ("other", "repo", "README.md"),
    ]


def test_list_directory_maps_entry_kinds() -> None:
    context, _ = make_context({"src/app.py": ""}, symlinks=["latest"])

    entries = run(context.list_directory())

    kinds = {entry.name: entry.kind for entry in entries}
    assert kinds == {"src": EntryKind.DIRECTORY, "latest": EntryKind.OTHER}


def test_list_directory_on_file_raises_not_a_directory() -> None:
    context, _ = make_context({"README.md": "x"})

    with pytest.raises(NotADirectoryContentError):
        run(context.list_directory("README.md"))


def test_read_file_on_directory_raises_is_a_directory() -> None:
    context, _ = make_context({"docs/a.md": "a"})

    with pytest.raises(NotAFileContentError, match="docs is a directory"):
        run(context.read_file("docs"))


def test_read_file_on_symlink_raises_is_not_a_file() -> None:
    context, _ = make_context(symlinks=["current"])

    with pytest.raises(NotAFileContentError, match="current is not a file"):
        run(context.read_file("current"))


def test_read_file_missing_propagates_client_error_and_is_not_cached() -> None:
    context, client = make_context()

    for _ in range(2):
        with pytest.raises(ContentNotFoundError):
            run(context.read_file("missing.txt"))

    assert client.calls_for("missing.txt") == 2


def test_all_entries_walks_every_directory_once() -> None:
    context, client = make_context(
        {
            "README.md": "",
            "src/pkg/__init__.py": "",
            "src/pkg/core.py": "",
            "docs/index.md": "",
        },
        directories=["empty"],
    )

    async def _twice() -> list[DirectoryEntry]:
        await context.all_entries()
        return await context.all_entries()

    entries = run(_twice())

    paths = sorted(entry.path for entry in entries)
    assert paths == [
        "README.md",
        "docs",
        "docs/index.md",
        "empty",
        "src",
        "src/pkg",
        "src/pkg/__init__.py",
        "src/pkg/core.py",
    ]
    for directory in ("", "docs", "empty", "src", "src/pkg"):
        assert client.calls_for(directory) == 1


def test_all_entries_skips_directories_that_fail_to_list() -> None:
    context, _ = make_context(
        {"broken/inner.txt": "", "ok/file.txt": ""},
        failing=["broken"],
    )

    paths = sorted(entry.path for entry in run(context.all_entries()))

    assert paths == ["broken", "ok", "ok/file.txt"]


def test_reset_clears_every_cache() -> None:
    context, client = make_context({"README.md": "x"})

    run(context.read_file("README.md"))
    run(context.all_entries())
    context.reset()
    run(context.read_file("README.md"))
    run(context.all_entries())

    assert client.calls_for("README.md") == 2
    assert client.calls_for("") == 2
