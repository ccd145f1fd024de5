"""Exception hierarchy for repolint."""

from __future__ import annotations


class RepolintError(Exception):
    """Base class for all repolint errors."""


class ContentError(RepolintError):
    """Repository content could not be retrieved."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ContentNotFoundError(ContentError):
    """Requested path does not exist in the repository."""


class NotADirectoryContentError(ContentError):
    """A directory listing was requested for a path that is a single entry."""


class NotAFileContentError(ContentError):
    """File content was requested for a directory or a non-file entry."""


class RuleOptionsError(RepolintError, ValueError):
    """Rule options failed schema validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class UnknownRuleError(RepolintError):
    """A rule identifier is not part of the known rule set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Rule {name} not found")
        self.name = name


class ConfigError(RepolintError):
    """Configuration file is missing, malformed, or invalid."""
