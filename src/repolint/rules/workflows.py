"""GitHub Actions workflow policy: every job declares a bounded timeout."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from repolint.context import RuleContext
from repolint.exceptions import ContentError
from repolint.rules.options import GithubActionsTimeoutMinutesOptions, RuleKind, coerce_options
from repolint.types import EntryKind, RuleResult

logger = logging.getLogger(__name__)

WORKFLOWS_PATH = ".github/workflows"
WORKFLOW_SUFFIXES: tuple[str, ...] = (".yml", ".yaml")
TIMEOUT_KEY = "timeout-minutes"


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    return f"{value:g}"


def check_workflow_jobs(file_path: str, workflow: Any, maximum: float | None) -> list[str]:
    """Check the jobs of one parsed workflow document."""
    errors: list[str] = []
    if not isinstance(workflow, dict):
        return errors
    jobs = workflow.get("jobs")
    if not isinstance(jobs, dict):
        return errors

    for job_name, job in jobs.items():
        if not isinstance(job, dict) or TIMEOUT_KEY not in job:
            errors.append(f'{file_path}: job "{job_name}" is missing {TIMEOUT_KEY}')
            continue
        timeout = job[TIMEOUT_KEY]
        if maximum is not None and _is_number(timeout) and timeout > maximum:
            errors.append(
                f'{file_path}: job "{job_name}" has {TIMEOUT_KEY} ({_format_number(timeout)}) '
                f"that is higher than {_format_number(maximum)}"
            )
    return errors


async def github_actions_timeout_minutes(
    context: RuleContext,
    options: GithubActionsTimeoutMinutesOptions | Mapping[str, Any] | None = None,
) -> RuleResult:
    """Require ``timeout-minutes`` on every workflow job, optionally capped."""
    opts: GithubActionsTimeoutMinutesOptions = coerce_options(
        RuleKind.GITHUB_ACTIONS_TIMEOUT_MINUTES, options, GithubActionsTimeoutMinutesOptions
    )

    try:
        listing = await context.list_directory(WORKFLOWS_PATH)
    except ContentError as exc:
        logger.debug("No workflows to check in %s: %s", context.repository.full_name, exc)
        return RuleResult()

    workflow_files = [
        entry
        for entry in listing
        if entry.kind is EntryKind.FILE and entry.name.endswith(WORKFLOW_SUFFIXES)
    ]

    errors: list[str] = []
    for entry in workflow_files:
        file_path = f"{WORKFLOWS_PATH}/{entry.name}"
        try:
            content = await context.read_file(file_path)
        except ContentError as exc:
            errors.append(f"{file_path}: failed to read file: {exc}")
            continue

        try:
            workflow = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            errors.append(f"{file_path}: failed to parse YAML: {exc}")
            continue

        errors.extend(check_workflow_jobs(file_path, workflow, opts.maximum))

    return RuleResult(errors=errors)
