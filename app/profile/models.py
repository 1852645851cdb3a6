"""
Data models for profile lookups.

ResolvedProfile is the fixed-shape record returned to callers, whatever
shape the upstream player payload had.
"""
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List

EXTENDED_FIELDS = ("matches_today", "wins_today", "losses_today", "total_matches")


@dataclass(frozen=True)
class ResolvedProfile:
    """A normalized player lookup for one game."""
    nickname: str
    player_id: Optional[str]
    game: str
    level: Optional[str]
    elo: Optional[int]
    retrieved_at: str  # ISO timestamp (UTC)
    # Match aggregates, only set by the history-aware resolver
    matches_today: Optional[int] = None
    wins_today: Optional[int] = None
    losses_today: Optional[int] = None
    total_matches: Optional[int] = None

    @property
    def has_match_stats(self) -> bool:
        return self.matches_today is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = asdict(self)
        if not self.has_match_stats:
            for name in EXTENDED_FIELDS:
                result.pop(name)
        return result


@dataclass(frozen=True)
class ProfileResult:
    """What gets cached per (nickname, game): the record and its chat line."""
    profile: ResolvedProfile
    text: str


@dataclass
class DailyStats:
    """Win/loss counts for matches started today."""
    matches: int = 0
    wins: int = 0
    losses: int = 0


@dataclass
class MatchHistoryItem:
    """One match from the player's history, as far as it could be read."""
    match_id: Optional[str]
    started_at: Optional[float]  # epoch seconds
    teams: Dict[str, Any] = field(default_factory=dict)
    winner: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "MatchHistoryItem":
        """Parse a raw history item; missing pieces become None/empty."""
        started_at = raw.get("started_at")
        if started_at is None:
            started_at = raw.get("startedAt")
        try:
            started_at = float(started_at) if started_at else None
        except (TypeError, ValueError):
            started_at = None

        teams = raw.get("teams")
        results = raw.get("results")
        winner = None
        if isinstance(results, dict):
            winner = results.get("winner") or results.get("winner_team") or None

        return cls(
            match_id=raw.get("match_id"),
            started_at=started_at,
            teams=teams if isinstance(teams, dict) else {},
            winner=winner,
        )

    def roster(self, faction: str) -> List[Any]:
        """Players of a faction: a `players` list, else `player_ids`."""
        team = self.teams.get(faction)
        if not isinstance(team, dict):
            return []
        players = team.get("players")
        if isinstance(players, list):
            return players
        player_ids = team.get("player_ids")
        return player_ids if isinstance(player_ids, list) else []
