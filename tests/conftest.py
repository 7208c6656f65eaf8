import pytest

from cardwise.application.review_service import ReviewService
from cardwise.infrastructure.adapters.json_store import InMemoryStore

# 2024-03-10 12:00:00 UTC
NOW_MS = 1_710_072_000_000


class FakeClock:
    """Settable epoch-ms clock."""

    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance_days(self, days: float) -> None:
        self.now += int(days * 86_400_000)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/store files
    monkeypatch.setenv("HOME", str(home))
    for var in ("CARDWISE_STORE_PATH", "CARDWISE_STRICT_OUTCOMES", "CARDWISE_FORECAST_DAYS"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(store, clock):
    return ReviewService(store, clock=clock)
