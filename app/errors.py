"""
Error taxonomy for profile lookups.

Every error carries a fixed, user-facing message. Upstream payloads are
never part of the message.
"""
from typing import Optional


class ProfileLookupError(Exception):
    """Base class for errors surfaced to callers as a fixed message."""

    user_message = "Erro ao consultar FACEIT"

    def __init__(self, detail: Optional[str] = None):
        # detail is for logs only
        self.detail = detail
        super().__init__(detail or self.user_message)


class ConfigurationMissing(ProfileLookupError):
    """FACEIT_KEY is not set."""

    user_message = "FACEIT_KEY não configurada"


class UpstreamError(ProfileLookupError):
    """Base class for failures talking to the FACEIT API."""

    status_code: Optional[int] = None


class UpstreamNotFound(UpstreamError):
    user_message = "Player não encontrado"
    status_code = 404


class UpstreamUnauthorized(UpstreamError):
    user_message = "API key inválida"
    status_code = 401


class UpstreamRateLimited(UpstreamError):
    user_message = "Rate limit da FACEIT (429)"
    status_code = 429


class UpstreamTimeout(UpstreamError):
    user_message = "Timeout ao consultar FACEIT"


class UpstreamGenericFailure(UpstreamError):
    user_message = "Erro ao consultar FACEIT"


_STATUS_ERRORS = {
    404: UpstreamNotFound,
    401: UpstreamUnauthorized,
    429: UpstreamRateLimited,
}


def error_for_status(status_code: Optional[int], detail: Optional[str] = None) -> UpstreamError:
    """Map an upstream HTTP status to its error class."""
    error_cls = _STATUS_ERRORS.get(status_code, UpstreamGenericFailure)
    return error_cls(detail or f"HTTP {status_code}")
