"""Per-repository caching access to remote repository contents."""

from __future__ import annotations

import base64
import binascii
import logging
import posixpath
from typing import Any

from repolint.exceptions import ContentError, NotADirectoryContentError, NotAFileContentError
from repolint.github.client import ContentClient, ContentPayload
from repolint.types import ROOT_PATH, DirectoryEntry, EntryKind, RepositoryRef

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a repo-relative path; the repository root is ``""``."""
    cleaned = path.strip().strip("/")
    if cleaned in ("", "."):
        return ROOT_PATH
    return posixpath.normpath(cleaned)


def split_path(path: str) -> tuple[str, str]:
    """Split a repo-relative path into (parent directory, basename)."""
    normalized = normalize_path(path)
    parent, name = posixpath.split(normalized)
    return parent, name


class RuleContext:
    """Caching facade over a content client for one repository.

    Three caches are kept independently: raw content payloads per path,
    decoded file text per path, and the flattened whole-tree snapshot. They
    only grow until ``reset`` is called.
    """

    def __init__(self, client: ContentClient, repository: RepositoryRef) -> None:
        self.client = client
        self.repository = repository
        self._content_cache: dict[str, ContentPayload] = {}
        self._file_cache: dict[str, str] = {}
        self._tree_cache: list[DirectoryEntry] | None = None

    def _cache_key(self, path: str) -> str:
        return f"{self.repository.full_name}:{path}"

    async def get_content(self, path: str = ROOT_PATH) -> ContentPayload:
        """Return the raw content payload for ``path``, fetching it at most once.

        Client errors propagate unchanged and are not cached.
        """
        path = normalize_path(path)
        key = self._cache_key(path)
        if key in self._content_cache:
            return self._content_cache[key]

        payload = await self.client.get_content(self.repository.owner, self.repository.name, path)
        self._content_cache[key] = payload
        return payload

    async def list_directory(self, path: str = ROOT_PATH) -> list[DirectoryEntry]:
        """List the entries of the directory at ``path``.

        Raises:
            ContentError: If the client cannot list the path
            NotADirectoryContentError: If the path holds a single entry
        """
        path = normalize_path(path)
        payload = await self.get_content(path)
        if not isinstance(payload, list):
            raise NotADirectoryContentError(f"{path or '/'} is not a directory", path=path)
        return [_entry_from_payload(path, item) for item in payload if isinstance(item, dict)]

    async def all_entries(self) -> list[DirectoryEntry]:
        """Return every entry reachable from the repository root.

        The walk uses an explicit stack of pending directories and lists each
        one through ``list_directory``. A directory that fails to list is
        skipped so a broken subtree does not hide the rest of the tree.
        """
        if self._tree_cache is not None:
            return self._tree_cache

        entries: list[DirectoryEntry] = []
        visited: set[str] = set()
        pending = [ROOT_PATH]
        while pending:
            directory = pending.pop()
            if directory in visited:
                continue
            visited.add(directory)

            try:
                listing = await self.list_directory(directory)
            except ContentError as exc:
                logger.debug("Skipping %s:%s during tree walk: %s", self.repository.full_name, directory or "/", exc)
                continue

            for entry in listing:
                entries.append(entry)
                if entry.kind is EntryKind.DIRECTORY:
                    pending.append(entry.path)

        self._tree_cache = entries
        return entries

    async def read_file(self, path: str) -> str:
        """Return the decoded UTF-8 text of the file at ``path``.

        Raises:
            ContentError: If the client cannot fetch the path
            NotAFileContentError: If the path is a directory or has no literal content
        """
        path = normalize_path(path)
        key = self._cache_key(f"file:{path}")
        if key in self._file_cache:
            return self._file_cache[key]

        payload = await self.get_content(path)
        if isinstance(payload, list):
            raise NotAFileContentError(f"{path} is a directory", path=path)
        if payload.get("type") != "file" or "content" not in payload:
            raise NotAFileContentError(f"{path} is not a file", path=path)

        text = _decode_content(path, payload)
        self._file_cache[key] = text
        return text

    def reset(self) -> None:
        """Drop all cached listings, file contents and the tree snapshot."""
        self._content_cache.clear()
        self._file_cache.clear()
        self._tree_cache = None


def _entry_from_payload(directory: str, item: dict[str, Any]) -> DirectoryEntry:
    name = str(item.get("name", ""))
    path = f"{directory}/{name}" if directory else name
    return DirectoryEntry(path=path, name=name, kind=EntryKind.from_api(item.get("type")))


def _decode_content(path: str, payload: dict[str, Any]) -> str:
    content = payload.get("content") or ""
    encoding = payload.get("encoding", "base64")
    if encoding in ("utf-8", "utf8"):
        return str(content)
    if encoding != "base64":
        raise NotAFileContentError(f"{path} has unsupported content encoding `{encoding}`", path=path)

    try:
        raw = base64.b64decode(content)
    except (binascii.Error, ValueError) as exc:
        raise NotAFileContentError(f"{path} has malformed base64 content: {exc}", path=path) from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise NotAFileContentError(f"{path} is not valid UTF-8 text", path=path) from exc
