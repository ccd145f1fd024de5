"""GitHub REST client used as the repository content source."""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable
from typing import Any, Protocol

from repolint.exceptions import ContentError, ContentNotFoundError
from repolint.types import RepositoryRef

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 20
REPOSITORIES_PER_PAGE = 100

VISIBILITIES: tuple[str, ...] = ("all", "public", "private")

ContentPayload = list[dict[str, Any]] | dict[str, Any]


class ContentClient(Protocol):
    """Remote repository content API consumed by ``RuleContext``.

    ``get_content`` returns a list of ``{name, path, type}`` mappings when
    ``path`` is a directory and a single mapping with ``type`` and a
    transport-encoded ``content`` when it is a file.
    """

    async def get_content(self, owner: str, repo: str, path: str) -> ContentPayload: ...

    async def list_repositories(self, visibility: str = "all") -> list[RepositoryRef]: ...

    async def get_repository(self, owner: str, repo: str) -> RepositoryRef: ...


class GitHubClient:
    """Minimal GitHub REST API client.

    Requests are issued with ``urllib`` on a worker thread so callers can
    await them; calls are never issued concurrently by repolint itself.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        urlopen_fn: Callable[..., Any] = urllib.request.urlopen,
    ) -> None:
        token = token.strip()
        if not token:
            raise ValueError("GitHub token must not be empty")
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._urlopen = urlopen_fn

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "repolint",
        }

    def _get_json(self, route: str, query: dict[str, Any] | None = None) -> Any:
        url = f"{self._api_url}{route}"
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        logger.debug("GET %s", url)

        request = urllib.request.Request(url, headers=self._headers(), method="GET")
        try:
            with self._urlopen(request, timeout=self._timeout_seconds) as response:
                return json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                raise ContentNotFoundError(f"Not Found: {route}") from exc
            raise ContentError(f"GitHub API returned HTTP {exc.code} for {route}: {exc.reason}") from exc
        except urllib.error.URLError as exc:
            raise ContentError(f"GitHub API request failed for {route}: {exc.reason}") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise ContentError(f"GitHub API request failed for {route}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ContentError(f"GitHub API returned invalid JSON for {route}: {exc}") from exc

    async def get_content(self, owner: str, repo: str, path: str) -> ContentPayload:
        quoted = urllib.parse.quote(path.strip("/"))
        route = f"/repos/{owner}/{repo}/contents/{quoted}" if quoted else f"/repos/{owner}/{repo}/contents"
        payload = await asyncio.to_thread(self._get_json, route)
        if not isinstance(payload, (list, dict)):
            raise ContentError(f"Unexpected content payload for {owner}/{repo}:{path}", path=path)
        return payload

    async def get_repository(self, owner: str, repo: str) -> RepositoryRef:
        payload = await asyncio.to_thread(self._get_json, f"/repos/{owner}/{repo}")
        if not isinstance(payload, dict):
            raise ContentError(f"Unexpected repository payload for {owner}/{repo}")
        return repository_from_api(payload)

    async def list_repositories(self, visibility: str = "all") -> list[RepositoryRef]:
        """List every repository visible to the authenticated user."""
        if visibility not in VISIBILITIES:
            raise ValueError(f"visibility must be one of {VISIBILITIES}, got `{visibility}`")

        repositories: list[RepositoryRef] = []
        page = 1
        while True:
            payload = await asyncio.to_thread(
                self._get_json,
                "/user/repos",
                {"visibility": visibility, "per_page": REPOSITORIES_PER_PAGE, "page": page},
            )
            if not isinstance(payload, list):
                raise ContentError("Unexpected repository listing payload from /user/repos")
            repositories.extend(repository_from_api(item) for item in payload if isinstance(item, dict))
            if len(payload) < REPOSITORIES_PER_PAGE:
                break
            page += 1

        logger.debug("Listed %d repositories (visibility=%s)", len(repositories), visibility)
        return repositories


def repository_from_api(payload: dict[str, Any]) -> RepositoryRef:
    """Build a ``RepositoryRef`` from a GitHub repository object."""
    owner = payload.get("owner") or {}
    login = owner.get("login") if isinstance(owner, dict) else None
    name = payload.get("name")
    if not login or not name:
        full_name = str(payload.get("full_name", ""))
        ref = RepositoryRef.parse(full_name)
        login, name = ref.owner, ref.name
    return RepositoryRef(
        owner=str(login),
        name=str(name),
        private=bool(payload.get("private", False)),
        archived=bool(payload.get("archived", False)),
    )
