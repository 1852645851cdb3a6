"""
FACEIT Data API client
Player lookups and match history, with upstream failures mapped to fixed errors
"""
import json
import logging
from typing import Optional, Dict, Any

import requests

from app.errors import (
    ConfigurationMissing,
    ProfileLookupError,
    UpstreamTimeout,
    UpstreamGenericFailure,
    error_for_status,
)
from config.settings import settings

logger = logging.getLogger("faceit_client")

FACEIT_BASE_URL = "https://open.faceit.com/data/v4"


class FaceitClient:
    """
    Thin wrapper over the FACEIT Data API v4.

    Every request carries a caller-chosen timeout and is attempted once.
    Any failure is raised as an UpstreamError subclass.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        debug: Optional[bool] = None,
    ):
        self.api_key = settings.faceit_key if api_key is None else api_key
        self.base_url = (base_url or settings.faceit_base_url or FACEIT_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.debug = settings.debug_faceit if debug is None else debug

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def _get_headers(self) -> dict:
        """Get API authentication headers."""
        return {"Authorization": f"Bearer {self.api_key}"}

    def _make_request(
        self,
        endpoint: str,
        params: Dict[str, Any],
        timeout: float,
    ) -> Dict[str, Any]:
        """
        GET an API endpoint and return the decoded JSON body.

        Raises:
            ConfigurationMissing: No API key configured
            UpstreamError: HTTP error, timeout, transport or decoding failure
        """
        if not self.is_configured:
            raise ConfigurationMissing()

        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.get(
                url,
                headers=self._get_headers(),
                params=params,
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise error_for_status(status, f"HTTP {status} from {endpoint}") from e
        except requests.Timeout as e:
            raise UpstreamTimeout(f"timeout after {timeout}s on {endpoint}") from e
        except requests.RequestException as e:
            raise UpstreamGenericFailure(f"{type(e).__name__} on {endpoint}") from e
        except ValueError as e:
            raise UpstreamGenericFailure(f"invalid JSON from {endpoint}") from e

        if not isinstance(data, dict):
            raise UpstreamGenericFailure(f"unexpected payload type from {endpoint}")

        if self.debug:
            logger.debug(f"{endpoint} data: {json.dumps(data, indent=2, default=str)}")
        return data

    def get_player(self, nickname: str, game: str, timeout: float) -> Dict[str, Any]:
        """Look up a player by nickname, filtered by game."""
        return self._make_request(
            "players",
            {"nickname": nickname, "game": game},
            timeout=timeout,
        )

    def get_match_history(
        self,
        player_id: str,
        game: str,
        timeout: float,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """Get the most recent matches for a player (newest first)."""
        return self._make_request(
            f"players/{player_id}/history",
            {"game": game, "limit": limit},
            timeout=timeout,
        )


def describe_error(error: ProfileLookupError) -> str:
    """Short code for logs: HTTP status, or the error class name."""
    status = getattr(error, "status_code", None)
    if status is not None:
        return str(status)
    return type(error).__name__
