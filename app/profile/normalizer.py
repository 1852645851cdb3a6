"""
Normalization of FACEIT player payloads.

The players endpoint is not consistent about `games`: it can be a list of
game objects, a mapping keyed by game id, or absent with a single embedded
`game` object instead. All three resolve to the same record.
"""
import logging
from typing import Optional, Dict, Any, List, Tuple

from app.utils.helpers import safe_lower, safe_int, first_present

logger = logging.getLogger("profile.normalizer")


def normalize_games(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the player's per-game objects as a list."""
    games = data.get("games")
    if isinstance(games, list):
        return [g for g in games if isinstance(g, dict)]
    if isinstance(games, dict) and games:
        return [g for g in games.values() if isinstance(g, dict)]
    game = data.get("game")
    if isinstance(game, dict):
        return [game]
    return []


def find_game(games: List[Dict[str, Any]], game: str) -> Optional[Dict[str, Any]]:
    """
    Find the entry for a game.

    Case-insensitive substring match of the query against the entry's
    name (or slug), or against its game_id.
    """
    query = safe_lower(game)
    for entry in games:
        name = safe_lower(entry.get("name") or entry.get("slug") or "")
        game_id = safe_lower(entry.get("game_id"))
        if query in name or (game_id and query in game_id):
            return entry
    return None


def _keyed_game(data: Dict[str, Any], game: str) -> Dict[str, Any]:
    """games[game] when games is a mapping."""
    games = data.get("games")
    if isinstance(games, dict):
        entry = games.get(safe_lower(game))
        if isinstance(entry, dict):
            return entry
    return {}


def extract_rating(
    data: Dict[str, Any],
    game: str,
) -> Tuple[Optional[str], Optional[int]]:
    """
    Extract (level, elo) for a game.

    Precedence: matched game object -> top-level field -> games[game].
    Zero or other falsy values mean "unset" upstream and become None.
    """
    game_obj = find_game(normalize_games(data), game) or {}
    keyed = _keyed_game(data, game)

    level = first_present(
        game_obj.get("skill_level"),
        data.get("skill_level"),
        keyed.get("skill_level"),
    )
    elo = first_present(
        game_obj.get("faceit_elo"),
        data.get("faceit_elo"),
        keyed.get("faceit_elo"),
    )

    level = str(level) if level else None
    elo = safe_int(elo, default=None) if elo else None
    return level, elo or None


def extract_identity(data: Dict[str, Any], fallback_nickname: str) -> Tuple[str, Optional[str]]:
    """Return (nickname, player_id), keeping the queried nickname if upstream has none."""
    player_id = data.get("player_id") or data.get("playerId") or None
    nickname = data.get("nickname") or fallback_nickname
    return str(nickname), (str(player_id) if player_id else None)
