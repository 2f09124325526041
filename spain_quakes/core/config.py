"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass

from spain_quakes.core.query import (
    BoundingBox,
    DEFAULT_YEARS_BACK,
    MAX_RESULT_LIMIT,
    SPAIN_BOUNDS,
)


# USGS FDSN Event Web Service base URL
USGS_API_BASE = "https://earthquake.usgs.gov/fdsnws/event/1/query"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        usgs_api_base: FDSN event query endpoint
        request_timeout_seconds: HTTP timeout, None waits indefinitely
        years_back: Length of the query window in years
        result_limit: Maximum events per fetch (capped at the feed maximum)
        bounds: Geographic box queried
        locale: Babel locale used for dates
        timezone: IANA timezone dates are shown in
        host: Interface the web server binds to
        port: Web server port
        log_level: Root logging level name
    """
    usgs_api_base: str = USGS_API_BASE
    request_timeout_seconds: float | None = None
    years_back: int = DEFAULT_YEARS_BACK
    result_limit: int = MAX_RESULT_LIMIT
    bounds: BoundingBox = SPAIN_BOUNDS
    locale: str = "es_ES"
    timezone: str = "Europe/Madrid"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
