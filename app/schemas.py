"""
Pydantic schemas for API responses
"""
from pydantic import BaseModel
from typing import Optional, Dict, Any


class ProfileResponse(BaseModel):
    """Resolved FACEIT profile with today's match stats"""
    nickname: str
    player_id: Optional[str] = None
    game: str
    level: Optional[str] = None
    elo: Optional[int] = None
    retrieved_at: str
    matches_today: int = 0
    wins_today: int = 0
    losses_today: int = 0
    total_matches: int = 0


class ErrorResponse(BaseModel):
    """Fixed user-facing error message"""
    error: str


class VersionResponse(BaseModel):
    name: str
    version: str
    full: str


class CacheStatsResponse(BaseModel):
    """Statistics for each response cache"""
    profile: Dict[str, Any]
    elo: Dict[str, Any]
