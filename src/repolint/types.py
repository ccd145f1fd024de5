"""Core domain types shared by the context, rules and runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ROOT_PATH = ""


class EntryKind(str, Enum):
    """Kind of a repository directory entry."""

    FILE = "file"
    DIRECTORY = "dir"
    OTHER = "other"

    @classmethod
    def from_api(cls, value: object) -> EntryKind:
        """Map a content API ``type`` discriminant onto an entry kind."""
        if value == "file":
            return cls.FILE
        if value == "dir":
            return cls.DIRECTORY
        return cls.OTHER


class EntryType(str, Enum):
    """Entry-type filter accepted by path-based rules."""

    FILE = "file"
    DIRECTORY = "directory"
    ANY = "any"

    def accepts(self, kind: EntryKind) -> bool:
        if self is EntryType.ANY:
            return True
        if self is EntryType.FILE:
            return kind is EntryKind.FILE
        return kind is EntryKind.DIRECTORY


class AlertLevel(str, Enum):
    """Severity bucket a rule's errors are reported under."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class RepositoryRef:
    """Identity of one hosted repository.

    Only ``owner`` and ``name`` take part in equality; the visibility and
    archive flags are metadata consumed by repository filters.
    """

    owner: str
    name: str
    private: bool = field(default=False, compare=False)
    archived: bool = field(default=False, compare=False)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, full_name: str) -> RepositoryRef:
        """Build a reference from an ``owner/name`` string."""
        owner, sep, name = full_name.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must be given as owner/name, got `{full_name}`")
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a repository directory listing."""

    path: str
    name: str
    kind: EntryKind


@dataclass
class RuleResult:
    """Outcome of a single rule evaluation. No errors means the rule passed."""

    errors: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors
