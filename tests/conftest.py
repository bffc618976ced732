import pytest
from typer.testing import CliRunner

from moviesdb.core.api_client import MoviesApiClient
from moviesdb.infrastructure.config import settings
from moviesdb.infrastructure.resilience.backoff import BackoffPolicy
from tests.fakes import FakeClock, ScriptedTransport


# --- Fixtures ---

@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def events():
    return []


@pytest.fixture
def client(transport, fake_clock, events):
    """MoviesApiClient wired to the scripted transport and the fake clock."""
    return MoviesApiClient(
        transport=transport,
        backoff=BackoffPolicy(),
        clock=fake_clock,
        observer=events.append,
    )


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the developer's real config, .env and API key."""
    for key in list(settings.SECRET_KEYS) + [
        settings.API_HOST, settings.BASE_URL, settings.TIMEOUT_SECONDS, settings.MAX_ATTEMPTS,
        settings.BACKOFF_BASE_SECONDS, settings.BACKOFF_MAX_DELAY_SECONDS,
        settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS, "LOGGING_LEVEL", "LOGGING_FILE",
    ]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    monkeypatch.chdir(tmp_path)
    settings.reset_config()
    yield
    settings.reset_config()
