"""Query window for the USGS event feed - Pure functions.

Defines the fixed geographic box and the time window every fetch uses,
and turns them into FDSN query parameters. No I/O happens here.
"""

from dataclasses import dataclass
from datetime import date


# USGS FDSN event service caps a single query at this many events
MAX_RESULT_LIMIT = 20000

# How far back the table looks
DEFAULT_YEARS_BACK = 50


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


# Iberian peninsula and the Balearic islands
SPAIN_BOUNDS = BoundingBox(
    min_latitude=36,
    max_latitude=44,
    min_longitude=-9.5,
    max_longitude=4,
)


@dataclass(frozen=True)
class QueryWindow:
    """Time and space window for one feed query.

    Attributes:
        start_date: First calendar day included
        end_date: Last calendar day included
        bounds: Geographic bounding box
        limit: Maximum number of events returned
    """
    start_date: date
    end_date: date
    bounds: BoundingBox = SPAIN_BOUNDS
    limit: int = MAX_RESULT_LIMIT

    @property
    def start_year(self) -> int:
        return self.start_date.year


def years_before(day: date, years: int) -> date:
    """Return the same calendar day ``years`` years earlier.

    Pure function. February 29 rolls over to March 1 when the target
    year is not a leap year.
    """
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return date(day.year - years, 3, 1)


def build_query_window(
    today: date,
    years_back: int = DEFAULT_YEARS_BACK,
    bounds: BoundingBox = SPAIN_BOUNDS,
    limit: int = MAX_RESULT_LIMIT,
    start_date: date | None = None,
) -> QueryWindow:
    """Build the query window ending today.

    Pure function.

    Args:
        today: End date of the window
        years_back: Window length in years, used when start_date is None
        bounds: Geographic bounding box
        limit: Maximum results, clamped to the feed maximum
        start_date: Fixed start date (kept for the whole session)

    Returns:
        QueryWindow
    """
    if start_date is None:
        start_date = years_before(today, years_back)

    return QueryWindow(
        start_date=start_date,
        end_date=today,
        bounds=bounds,
        limit=min(limit, MAX_RESULT_LIMIT),
    )


def _format_number(value: float) -> str:
    """Render 36.0 as '36' and -9.5 as '-9.5'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def query_params(window: QueryWindow) -> dict[str, str]:
    """Build FDSN query parameters for a window.

    Pure function. Dates are sent without a time component.

    Args:
        window: Query window

    Returns:
        Dict of URL query parameters
    """
    bounds = window.bounds
    return {
        "format": "geojson",
        "starttime": window.start_date.isoformat(),
        "endtime": window.end_date.isoformat(),
        "minlatitude": _format_number(bounds.min_latitude),
        "maxlatitude": _format_number(bounds.max_latitude),
        "minlongitude": _format_number(bounds.min_longitude),
        "maxlongitude": _format_number(bounds.max_longitude),
        "limit": str(window.limit),
    }
