"""Shared pytest setup for repolint tests."""

from pathlib import Path

import pytest

from repolint.cli import TOKEN_ENV_VAR
from repolint.config import WORKSPACE_ENV_VAR


@pytest.fixture(autouse=True)
def _isolated_github_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's GitHub token and workspace out of every test."""
    monkeypatch.delenv(TOKEN_ENV_VAR, raising=False)
    monkeypatch.delenv(WORKSPACE_ENV_VAR, raising=False)


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    """Fail a --cov run that recorded nothing for the repolint package."""
    if not any(str(arg).startswith("--cov") for arg in session.config.invocation_params.args):
        return

    root = Path(session.config.rootpath)
    if not any(root.glob(".coverage*")):
        pytest.exit(
            f"--cov was given but no coverage data was written under {root}; "
            "install repolint (pip install -e .) so tests import the measured package.",
            returncode=1,
        )
