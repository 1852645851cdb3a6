"""
One-line chat summaries for resolved profiles.
"""
from app.errors import ProfileLookupError

from .models import ResolvedProfile


def _match_suffix(profile: ResolvedProfile) -> str:
    return (
        f" | Hoje: {profile.wins_today}W {profile.losses_today}L "
        f"({profile.matches_today} partidas) | Total: {profile.total_matches}"
    )


def format_summary(profile: ResolvedProfile, query_nickname: str) -> str:
    """
    Build the chat line for a profile.

    - full: ELO and level known
    - partial: level only
    - not found: neither, mentions the nickname as queried
    Daily/total stats are appended when the profile carries them.
    """
    suffix = _match_suffix(profile) if profile.has_match_stats else ""

    if profile.elo and profile.level:
        return f"{profile.nickname} — ELO: {profile.elo} | Level: {profile.level}{suffix}"
    if profile.level:
        return f"{profile.nickname} — Level: {profile.level}{suffix}"
    return f"Perfil {query_nickname} não encontrado ou sem dados para {profile.game}."


def format_error(error: ProfileLookupError) -> str:
    """Chat line for a failed lookup."""
    return f"Erro ao buscar ELO — {error.user_message}"


def format_loading(nickname: str) -> str:
    """Placeholder while a background lookup has not filled the cache yet."""
    return f"Carregando ELO de {nickname}... tente novamente em instantes."
