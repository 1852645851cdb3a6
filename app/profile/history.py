"""
Daily win/loss aggregation over a player's recent match history.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable

from .models import MatchHistoryItem, DailyStats

logger = logging.getLogger("profile.history")

FACTIONS = ("faction1", "faction2")


def start_of_day(now: datetime) -> datetime:
    """Local midnight of the day `now` falls on."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _is_member(entry: Any, player_id: Optional[str], nickname: str) -> bool:
    """Roster entries are player dicts or bare player ids."""
    if isinstance(entry, dict):
        if entry.get("player_id"):
            return entry.get("player_id") == player_id
        return entry.get("nickname") == nickname
    return player_id is not None and entry == player_id


def find_player_faction(
    match: MatchHistoryItem,
    player_id: Optional[str],
    nickname: str,
) -> Optional[str]:
    """Which faction the player was on, checking faction1 first."""
    for faction in FACTIONS:
        if any(_is_member(p, player_id, nickname) for p in match.roster(faction)):
            return faction
    return None


def parse_history(items: Iterable[Any]) -> List[MatchHistoryItem]:
    return [MatchHistoryItem.from_api(raw) for raw in items if isinstance(raw, dict)]


def aggregate_today(
    matches: List[MatchHistoryItem],
    player_id: Optional[str],
    nickname: str,
    now: datetime,
) -> DailyStats:
    """
    Count matches started between local midnight and `now`.

    A match whose winner or player faction cannot be determined is counted
    as played but neither won nor lost. This undercounts wins/losses on
    incomplete upstream payloads.
    """
    day_start = start_of_day(now).timestamp()
    stats = DailyStats()

    for match in matches:
        if not match.started_at:
            continue
        if match.started_at < day_start:
            continue

        stats.matches += 1
        faction = find_player_faction(match, player_id, nickname)

        if match.winner and faction:
            if match.winner == faction:
                stats.wins += 1
            else:
                stats.losses += 1
        else:
            logger.debug(
                f"Match {match.match_id} counted without result "
                f"(winner={match.winner}, faction={faction})"
            )

    return stats


def total_matches(history: Dict[str, Any], items: List[Any]) -> int:
    """Upstream `total` when it is an int, else the number of items returned."""
    total = history.get("total")
    if isinstance(total, int) and not isinstance(total, bool):
        return total
    return len(items)
