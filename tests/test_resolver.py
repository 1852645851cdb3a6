"""
Unit tests for ProfileResolver using a fake FACEIT client.
"""
import pytest

from app.cache import ResponseCache
from app.errors import UpstreamRateLimited, UpstreamTimeout, UpstreamNotFound
from app.profile import ProfileResolver, ProfileResult
from tests.conftest import FakeFaceitClient, NOW, PLAYER_ID


@pytest.fixture
def cache(clock, inline_executor):
    return ResponseCache(ttl_seconds=60, clock=clock, executor=inline_executor)


def _resolver(client, cache, include_history=True):
    return ProfileResolver(
        client,
        cache,
        timeout=1.5,
        include_history=include_history,
        now=lambda: NOW,
    )


# =============================================================================
# resolve
# =============================================================================

class TestResolve:

    def test_resolves_elo_level_and_daily_stats(self, cache, player_payload, history_payload):
        client = FakeFaceitClient(player=player_payload, history=history_payload)
        result = _resolver(client, cache).resolve("gaules", "cs2")

        profile = result.profile
        assert profile.nickname == "Gaules"
        assert profile.player_id == PLAYER_ID
        assert profile.game == "cs2"
        assert profile.elo == 1800
        assert profile.level == "7"
        assert (profile.matches_today, profile.wins_today, profile.losses_today) == (4, 2, 1)
        assert profile.total_matches == 812
        assert profile.retrieved_at.endswith("Z")
        assert result.text == (
            "Gaules — ELO: 1800 | Level: 7 | Hoje: 2W 1L (4 partidas) | Total: 812"
        )

    def test_uses_timeout_and_history_limit(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        _resolver(client, cache).resolve("gaules", "CS2")

        assert client.player_calls == [("gaules", "cs2", 1.5)]
        assert client.history_calls == [(PLAYER_ID, "cs2", 1.5, 50)]

    def test_writes_result_to_cache(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        result = _resolver(client, cache).resolve("gaules", "cs2")
        assert cache.get(("gaules", "cs2")) is result

    def test_zero_elo_becomes_none(self, cache):
        client = FakeFaceitClient(player={
            "player_id": "p1",
            "nickname": "newbie",
            "games": [{"slug": "cs2", "faceit_elo": 0, "skill_level": 1}],
        })
        result = _resolver(client, cache, include_history=False).resolve("newbie", "cs2")
        assert result.profile.elo is None
        assert result.text == "newbie — Level: 1"

    def test_history_failure_degrades_to_zero(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload, history=UpstreamTimeout())
        result = _resolver(client, cache).resolve("gaules", "cs2")

        profile = result.profile
        assert profile.matches_today == 0
        assert profile.wins_today == 0
        assert profile.losses_today == 0
        assert profile.total_matches == 0
        assert profile.elo == 1800

    def test_unexpected_history_exception_also_degrades(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload, history=RuntimeError("boom"))
        result = _resolver(client, cache).resolve("gaules", "cs2")
        assert result.profile.matches_today == 0

    def test_no_history_request_without_player_id(self, cache):
        client = FakeFaceitClient(player={"games": [{"slug": "cs2", "skill_level": 4}]})
        result = _resolver(client, cache).resolve("gaules", "cs2")

        assert client.history_calls == []
        assert result.profile.player_id is None
        assert result.profile.total_matches == 0
        assert result.text == "gaules — Level: 4 | Hoje: 0W 0L (0 partidas) | Total: 0"

    def test_without_history_variant(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        result = _resolver(client, cache, include_history=False).resolve("gaules", "cs2")

        assert client.history_calls == []
        assert result.profile.matches_today is None
        assert result.text == "Gaules — ELO: 1800 | Level: 7"

    def test_not_found_text_when_game_missing(self, cache):
        client = FakeFaceitClient(player={"nickname": "Gaules", "games": []})
        result = _resolver(client, cache, include_history=False).resolve("gaules", "dota2")
        assert result.text == "Perfil gaules não encontrado ou sem dados para dota2."

    def test_upstream_error_propagates_and_is_not_cached(self, cache):
        client = FakeFaceitClient(player=UpstreamRateLimited())
        with pytest.raises(UpstreamRateLimited) as exc_info:
            _resolver(client, cache).resolve("gaules", "cs2")
        assert exc_info.value.user_message == "Rate limit da FACEIT (429)"
        assert cache.get(("gaules", "cs2")) is None


# =============================================================================
# lookup / peek_and_refresh
# =============================================================================

class TestLookup:

    def test_second_lookup_served_from_cache(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        resolver = _resolver(client, cache)

        first = resolver.lookup("gaules", "cs2")
        second = resolver.lookup("gaules", "cs2")

        assert first is second
        assert len(client.player_calls) == 1

    def test_lookup_refetches_after_ttl(self, cache, clock, player_payload):
        client = FakeFaceitClient(player=player_payload)
        resolver = _resolver(client, cache)

        resolver.lookup("gaules", "cs2")
        clock.advance(61)
        resolver.lookup("gaules", "cs2")

        assert len(client.player_calls) == 2


class TestPeekAndRefresh:

    def test_miss_returns_none_and_fills_cache_in_background(self, cache, inline_executor, player_payload):
        client = FakeFaceitClient(player=player_payload)
        resolver = _resolver(client, cache, include_history=False)

        assert resolver.peek_and_refresh("gaules", "cs2") is None
        assert inline_executor.submitted == 1

        cached = resolver.peek_and_refresh("gaules", "cs2")
        assert isinstance(cached, ProfileResult)
        assert cached.text == "Gaules — ELO: 1800 | Level: 7"

    def test_hit_returns_cached_value_before_refresh(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        resolver = _resolver(client, cache, include_history=False)
        resolver.resolve("gaules", "cs2")

        player_payload["games"][1]["faceit_elo"] = 1850
        stale = resolver.peek_and_refresh("gaules", "cs2")

        assert stale.profile.elo == 1800
        assert cache.get(("gaules", "cs2")).profile.elo == 1850

    def test_background_failure_keeps_previous_value(self, cache, player_payload):
        client = FakeFaceitClient(player=player_payload)
        resolver = _resolver(client, cache, include_history=False)
        resolver.resolve("gaules", "cs2")

        client.player = UpstreamNotFound()
        stale = resolver.peek_and_refresh("gaules", "cs2")

        assert stale.profile.elo == 1800
        assert cache.get(("gaules", "cs2")).profile.elo == 1800
        assert cache.get_stats()["refreshes_failed"] == 1
