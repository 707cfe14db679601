"""Shared pytest fixtures and test helpers for milaan tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from milaan.config.models import LatencyConfig
from milaan.config.settings import MilaanSettings
from milaan.domain.models import User
from milaan.infrastructure.session import SessionStore

# Seeded directory: two helpers, two askers.
HELPER_ID = "user_1"
ASKER_ID = "user_2"
SECOND_HELPER_ID = "user_3"
SECOND_ASKER_ID = "user_4"

_ZERO_LATENCY_TOML = """\
[latency]
login = 0
user_lookup = 0
problem_list = 0
problem_detail = 0
comments = 0
problem_search = 0
user_search = 0
"""


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep env config and logging handlers from leaking between tests."""
    for name in ("MILAAN_CONFIG", "MILAAN_ROOT"):
        monkeypatch.delenv(name, raising=False)
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> MilaanSettings:
    """Settings rooted in a temp dir, seeded, with no simulated latency."""
    return MilaanSettings(root=tmp_path, latency=LatencyConfig.none())


@pytest.fixture
def store(settings: MilaanSettings) -> Iterator[SessionStore]:
    """Seeded session store with the built-in plugins loaded."""
    s = SessionStore(settings)
    s.init_plugins()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def bare_store(settings: MilaanSettings) -> Iterator[SessionStore]:
    """Seeded session store without plugins (no event dispatch)."""
    s = SessionStore(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the CLI from a temp dir whose ``milaan.toml`` disables latency.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    (tmp_path / "milaan.toml").write_text(_ZERO_LATENCY_TOML, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def login_as(store: SessionStore, user_id: str) -> User:
    """Adopt a seeded user as current without going through the async login."""
    user = store.get_user(user_id)
    assert user is not None, f"{user_id} is not seeded"
    store.set_current_user(user)
    return user
