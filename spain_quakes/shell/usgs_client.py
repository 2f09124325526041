"""USGS API Client - Imperative Shell.

This module handles HTTP communication with the USGS Earthquake API.
All I/O is contained here; business logic is in the core module.

Failures never leave this module as exceptions: ``fetch`` returns a
FetchResult carrying either the parsed events or a display message.
"""

import logging
from dataclasses import dataclass, field

import requests

from spain_quakes.core.config import USGS_API_BASE
from spain_quakes.core.earthquake import Earthquake, parse_earthquakes
from spain_quakes.core.query import QueryWindow, query_params


logger = logging.getLogger(__name__)


DEFAULT_ERROR_MESSAGE = "Failed to fetch data"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one feed query.

    Attributes:
        events: Parsed events (empty on failure)
        error: Human-readable failure message, None on success
    """
    events: tuple[Earthquake, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, events: list[Earthquake]) -> "FetchResult":
        return cls(events=tuple(events))

    @classmethod
    def failure(cls, message: str | None) -> "FetchResult":
        return cls(error=message or DEFAULT_ERROR_MESSAGE)


class USGSClient:
    """Client for fetching earthquake data from USGS API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = USGS_API_BASE,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize USGS client.

        Args:
            base_url: USGS API base URL
            timeout: Request timeout in seconds (None for no timeout)
            session: Optional requests session to reuse connections
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_params(self, window: QueryWindow) -> dict[str, str]:
        """Build query parameters for USGS API request."""
        return query_params(window)

    def fetch(self, window: QueryWindow) -> FetchResult:
        """Fetch the events inside a query window.

        This method performs HTTP I/O.

        Args:
            window: Query window

        Returns:
            FetchResult with events, or with an error message if the
            request or the JSON decoding failed
        """
        params = self.build_params(window)

        logger.info(
            "Fetching earthquakes from USGS",
            extra={"params": params},
        )

        try:
            response = self.session.get(
                self.base_url,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("USGS fetch failed: %s", e)
            return FetchResult.failure(str(e))

        if not isinstance(data, dict):
            logger.warning("Unexpected USGS payload type: %s", type(data).__name__)
            return FetchResult.failure(None)

        try:
            earthquakes = parse_earthquakes(data)
        except ValueError as e:
            logger.warning("USGS payload rejected: %s", e)
            return FetchResult.failure(None)

        logger.info(
            "Fetched %d earthquakes from USGS",
            len(earthquakes),
        )

        return FetchResult.success(earthquakes)
