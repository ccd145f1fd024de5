"""GitHub content access for repolint."""

from repolint.github.client import (
    VISIBILITIES,
    ContentClient,
    ContentPayload,
    GitHubClient,
    repository_from_api,
)

__all__ = [
    "VISIBILITIES",
    "ContentClient",
    "ContentPayload",
    "GitHubClient",
    "repository_from_api",
]
