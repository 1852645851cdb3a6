"""
Profile lookups: normalization, daily match stats, chat summaries.
"""
from .models import ResolvedProfile, ProfileResult, MatchHistoryItem, DailyStats
from .resolver import ProfileResolver
from .formatter import format_summary, format_error, format_loading

__all__ = [
    "ResolvedProfile",
    "ProfileResult",
    "MatchHistoryItem",
    "DailyStats",
    "ProfileResolver",
    "format_summary",
    "format_error",
    "format_loading",
]
