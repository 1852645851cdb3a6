"""
Profile resolver: upstream lookup, normalization, and caching.

Two configurations are used by the app:
- with history: adds today's W/L and total match count (short timeout)
- without history: ELO/level only, refreshed in the background for /elo
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Callable
from concurrent.futures import Future

from app.cache import ResponseCache, make_cache_key
from app.errors import UpstreamError
from app.faceit_client import FaceitClient, describe_error
from app.utils.helpers import safe_lower

from .formatter import format_summary
from .history import parse_history, aggregate_today, total_matches
from .models import ResolvedProfile, ProfileResult, DailyStats
from .normalizer import extract_rating, extract_identity

logger = logging.getLogger("profile.resolver")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ProfileResolver:
    """
    Resolves (nickname, game) into a ProfileResult and caches it.

    Usage:
        resolver = ProfileResolver(client, ResponseCache(ttl_seconds=60))
        result = resolver.lookup("s1mple", "cs2")
        print(result.text)
    """

    def __init__(
        self,
        client: FaceitClient,
        cache: ResponseCache,
        timeout: float = 1.5,
        include_history: bool = True,
        history_limit: int = 50,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            client: FACEIT API client
            cache: Cache the results are written to
            timeout: Per-request upstream timeout in seconds
            include_history: Fetch match history and aggregate today's matches
            history_limit: Number of recent matches to request
            now: Local wall clock, used for the "today" window
        """
        self.client = client
        self.cache = cache
        self.timeout = timeout
        self.include_history = include_history
        self.history_limit = history_limit
        self._now = now

    def resolve(self, nickname: str, game: str) -> ProfileResult:
        """
        Fetch from upstream, build the record and chat line, and cache them.

        Raises:
            ConfigurationMissing: No API key
            UpstreamError: The player lookup failed
        """
        game = safe_lower(game)
        data = self.client.get_player(nickname, game, timeout=self.timeout)

        player_nickname, player_id = extract_identity(data, nickname)
        level, elo = extract_rating(data, game)

        match_fields = {}
        if self.include_history:
            stats, total = self._match_stats(player_id, player_nickname, game)
            match_fields = {
                "matches_today": stats.matches,
                "wins_today": stats.wins,
                "losses_today": stats.losses,
                "total_matches": total,
            }

        profile = ResolvedProfile(
            nickname=player_nickname,
            player_id=player_id,
            game=game,
            level=level,
            elo=elo,
            retrieved_at=_utc_timestamp(),
            **match_fields,
        )
        result = ProfileResult(profile=profile, text=format_summary(profile, nickname))

        self.cache.put(make_cache_key(nickname, game), result)
        logger.info(f"Resolved {nickname}/{game}: elo={elo} level={level}")
        return result

    def _match_stats(
        self,
        player_id: Optional[str],
        nickname: str,
        game: str,
    ) -> tuple:
        """
        (DailyStats, total_matches) from the match history.

        A failed history request degrades to zeros instead of failing the lookup.
        """
        if not player_id:
            return DailyStats(), 0

        try:
            history = self.client.get_match_history(
                player_id, game, timeout=self.timeout, limit=self.history_limit
            )
        except UpstreamError as e:
            logger.warning(f"History fetch failed for {nickname}: {describe_error(e)}")
            return DailyStats(), 0
        except Exception as e:
            logger.warning(f"History fetch failed for {nickname}: {e}")
            return DailyStats(), 0

        items = history.get("items")
        if not isinstance(items, list):
            items = []
        matches = parse_history(items)
        stats = aggregate_today(matches, player_id, nickname, self._now())
        return stats, total_matches(history, items)

    def lookup(self, nickname: str, game: str) -> ProfileResult:
        """Cached result for (nickname, game), resolving on a miss."""
        cached = self.cache.get(make_cache_key(nickname, game))
        if cached is not None:
            return cached
        return self.resolve(nickname, game)

    def peek_and_refresh(self, nickname: str, game: str) -> Optional[ProfileResult]:
        """
        Return whatever is cached right now and refresh it in the background.

        Never waits on upstream. Returns None when nothing is cached yet.
        """
        cached = self.cache.get(make_cache_key(nickname, game))
        self.schedule_refresh(nickname, game)
        return cached

    def schedule_refresh(self, nickname: str, game: str) -> Optional[Future]:
        """Start a background resolve; its outcome is discarded by the cache."""
        return self.cache.refresh_in_background(
            make_cache_key(nickname, game),
            lambda: self.resolve(nickname, game),
        )
