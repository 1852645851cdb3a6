"""
Shared fixtures: fake clock, inline executor, canned FACEIT payloads.
"""
import pytest
from concurrent.futures import Executor, Future
from datetime import datetime

from config.settings import Settings

# Local wall clock used for "today" in tests
NOW = datetime(2026, 10, 18, 15, 0, 0)
PLAYER_ID = "a1b2c3d4-0000-4000-8000-000000000001"


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InlineExecutor(Executor):
    """Runs submitted work immediately, so background refreshes are deterministic."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until run_all() is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)


class FakeFaceitClient:
    """Stands in for FaceitClient; returns or raises canned responses."""

    def __init__(self, player=None, history=None, configured=True):
        self.player = player if player is not None else {}
        self.history = history if history is not None else {"items": []}
        self.configured = configured
        self.player_calls = []
        self.history_calls = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def get_player(self, nickname, game, timeout):
        self.player_calls.append((nickname, game, timeout))
        if isinstance(self.player, Exception):
            raise self.player
        return self.player

    def get_match_history(self, player_id, game, timeout, limit=50):
        self.history_calls.append((player_id, game, timeout, limit))
        if isinstance(self.history, Exception):
            raise self.history
        return self.history


def ts(*args) -> float:
    """Epoch seconds for a local datetime."""
    return datetime(*args).timestamp()


def make_match(match_id, started_at, winner, faction1, faction2, roster_key="players"):
    return {
        "match_id": match_id,
        "started_at": started_at,
        "teams": {
            "faction1": {roster_key: faction1},
            "faction2": {roster_key: faction2},
        },
        "results": {"winner": winner},
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def test_settings():
    return Settings(faceit_key="test-key", debug_faceit=False, _env_file=None)


@pytest.fixture
def player_payload():
    """Player lookup with games as a list."""
    return {
        "player_id": PLAYER_ID,
        "nickname": "Gaules",
        "games": [
            {"game_id": "csgo", "name": "csgo", "faceit_elo": 1200, "skill_level": 5},
            {"game_id": "cs2", "slug": "cs2", "faceit_elo": 1800, "skill_level": 7},
        ],
    }


@pytest.fixture
def history_payload():
    """Two wins, one loss and one unresolved match today, one match yesterday."""
    me = {"player_id": PLAYER_ID, "nickname": "Gaules"}
    other = {"player_id": "other-1", "nickname": "someone"}
    return {
        "items": [
            make_match("m1", ts(2026, 10, 18, 14, 0), "faction1", [me], [other]),
            make_match("m2", ts(2026, 10, 18, 12, 0), "faction2", [other], [me]),
            make_match("m3", ts(2026, 10, 18, 10, 0), "faction2", [me], [other]),
            make_match("m4", ts(2026, 10, 18, 9, 0), None, [me], [other]),
            make_match("m5", ts(2026, 10, 17, 22, 0), "faction1", [me], [other]),
        ],
        "total": 812,
    }
