"""Evaluate configured rules across the selected repositories."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from repolint.config import Config, RepositoryFilters
from repolint.context import RuleContext
from repolint.github.client import ContentClient
from repolint.rules import evaluate_rule
from repolint.types import AlertLevel, RepositoryRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    """Violations reported by one rule, bucketed by its configured level."""

    rule: str
    level: AlertLevel
    errors: tuple[str, ...] = ()

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.errors if self.level is AlertLevel.WARNING else ()

    @property
    def failures(self) -> tuple[str, ...]:
        return self.errors if self.level is AlertLevel.ERROR else ()


@dataclass(frozen=True)
class RepositoryReport:
    repository: RepositoryRef
    results: tuple[RuleOutcome, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return any(outcome.failures for outcome in self.results)


def _search_any(patterns: Iterable[str], repository: RepositoryRef) -> bool:
    for pattern in patterns:
        regex = re.compile(pattern)
        if regex.search(repository.name) or regex.search(repository.full_name):
            return True
    return False


def matches_filters(repository: RepositoryRef, filters: RepositoryFilters | None) -> bool:
    """Return True when ``repository`` passes every configured filter."""
    if filters is None:
        return True

    if filters.visibility == "public" and repository.private:
        return False
    if filters.visibility == "private" and not repository.private:
        return False

    if filters.archived is not None and filters.archived != repository.archived:
        return False

    if filters.organizations and repository.owner not in filters.organizations:
        return False

    if filters.include and not _search_any(filters.include, repository):
        return False
    if filters.exclude and _search_any(filters.exclude, repository):
        return False

    return True


def select_repositories(
    repositories: Iterable[RepositoryRef],
    filters: RepositoryFilters | None,
) -> list[RepositoryRef]:
    """Filter repositories, preserving input order."""
    return [repository for repository in repositories if matches_filters(repository, filters)]


async def run_rules_for_repository(
    client: ContentClient,
    repository: RepositoryRef,
    config: Config,
) -> RepositoryReport:
    """Evaluate every configured rule, in order, against one repository.

    Rules share a single ``RuleContext`` so listings and file reads are
    fetched at most once per repository. Rules that pass are not recorded.
    """
    context = RuleContext(client, repository)
    results: list[RuleOutcome] = []

    for rule_config in config.rules:
        logger.debug("Evaluating %s on %s", rule_config.name, repository.full_name)
        result = await evaluate_rule(rule_config.kind, context, rule_config.options)
        if result.errors:
            results.append(
                RuleOutcome(rule=rule_config.name, level=rule_config.level, errors=tuple(result.errors))
            )

    return RepositoryReport(repository=repository, results=tuple(results))


async def run(
    client: ContentClient,
    config: Config,
    repositories: Sequence[RepositoryRef] | None = None,
) -> list[RepositoryReport]:
    """Audit every selected repository sequentially.

    When ``repositories`` is None the authenticated user's repositories are
    listed with the configured visibility.
    """
    if repositories is None:
        repositories = await client.list_repositories(config.filters.visibility)

    selected = select_repositories(repositories, config.filters)
    logger.info("Auditing %d of %d repositories", len(selected), len(repositories))

    reports: list[RepositoryReport] = []
    for repository in selected:
        reports.append(await run_rules_for_repository(client, repository, config))
    return reports
