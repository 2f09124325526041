"""View model for the earthquake table - Pure functions.

This module turns the display state into everything the page shows:
filtered and sorted rows, button labels and summary text.
All functions are pure with no side effects; dates are formatted with
Babel so labels follow the configured locale.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from babel import Locale
from babel.dates import format_date, format_time

from spain_quakes.core.earthquake import Earthquake
from spain_quakes.core.query import QueryWindow
from spain_quakes.core.state import DisplayState


MAJOR_MAGNITUDE = 5.0

DEFAULT_LOCALE = "es_ES"

TITLE = "Earthquakes in Spain (Last 50 Years)"
LOADING_TEXT = "Loading..."
REFRESH_LABEL = "Refresh Results"
LAST_UPDATE_PREFIX = "Última actualización"
DETAILS_LABEL = "USGS"
COLUMNS = ("Ismajor", "Date", "Magnitude", "Location", "Coordinates", "Details")


@dataclass(frozen=True)
class DisplayRow:
    """One table row.

    Attributes:
        id: USGS event ID
        is_major: Magnitude is at least MAJOR_MAGNITUDE
        date_label: Locale formatted calendar date of the event
        magnitude: Raw magnitude (None when unknown)
        place: Location description
        latitude: Latitude rounded to two decimals
        longitude: Longitude rounded to two decimals
        details_url: USGS event page
    """
    id: str
    is_major: bool
    date_label: str
    magnitude: float | None
    place: str | None
    latitude: float | None
    longitude: float | None
    details_url: str

    @property
    def magnitude_label(self) -> str:
        """Magnitude as shown in the table; whole values drop the '.0'."""
        if self.magnitude is None:
            return ""
        if float(self.magnitude).is_integer():
            return str(int(self.magnitude))
        return str(self.magnitude)

    @property
    def coordinates_label(self) -> str:
        """'lat, lon' with two fixed decimals."""
        if self.latitude is None or self.longitude is None:
            return ""
        return f"{self.latitude:.2f}, {self.longitude:.2f}"


@dataclass(frozen=True)
class PageView:
    """Everything the page template renders.

    ``rows`` is only populated when the table is visible, i.e. when no
    fetch is in flight and the last fetch did not fail.
    """
    title: str
    show_loading: bool
    error_message: str | None
    show_table: bool
    rows: tuple[DisplayRow, ...]
    filter_spain: bool
    toggle_label: str
    summary: str
    last_update_label: str | None
    start_year: int


def mentions_spain(earthquake: Earthquake) -> bool:
    """Check if the place text mentions Spain (case-insensitive).

    Pure function. Events without a place never match.
    """
    if not earthquake.place:
        return False
    return "spain" in earthquake.place.lower()


def filter_events(
    earthquakes: list[Earthquake] | tuple[Earthquake, ...],
    filter_spain: bool,
) -> list[Earthquake]:
    """Apply the location filter.

    Pure function.

    Args:
        earthquakes: Events to filter
        filter_spain: Keep only events mentioning Spain when True

    Returns:
        New list of retained events
    """
    if not filter_spain:
        return list(earthquakes)
    return [e for e in earthquakes if mentions_spain(e)]


def sort_by_magnitude(
    earthquakes: list[Earthquake] | tuple[Earthquake, ...],
) -> list[Earthquake]:
    """Sort events by magnitude, largest first.

    Pure function. Unknown magnitudes compare as 0; the sort is stable so
    equal magnitudes keep their feed order.
    """
    return sorted(
        earthquakes,
        key=lambda e: e.magnitude if e.magnitude is not None else 0.0,
        reverse=True,
    )


def is_major(magnitude: float | None) -> bool:
    """Return True for magnitude >= 5.0; unknown magnitude is never major."""
    return magnitude is not None and magnitude >= MAJOR_MAGNITUDE


def _round_coordinate(value: float | None) -> float | None:
    if value is None:
        return None
    return round(value, 2)


def numeric_date_pattern(locale: str = DEFAULT_LOCALE) -> str:
    """The locale's short date pattern with the year widened to four digits."""
    pattern = Locale.parse(locale).date_formats["short"].pattern
    return re.sub(r"y+", "y", pattern)


def format_event_date(
    earthquake: Earthquake,
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = timezone.utc,
) -> str:
    """Format the event's calendar date for the given locale.

    Pure function. Uses the locale's numeric date order with a full
    year, e.g. '19/12/2023' for es_ES and '12/19/2023' for en_US.
    """
    return format_date(
        earthquake.time.astimezone(tz).date(),
        format=numeric_date_pattern(locale),
        locale=locale,
    )


def build_row(
    earthquake: Earthquake,
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = timezone.utc,
) -> DisplayRow:
    """Map one event to a display row.

    Pure function.
    """
    return DisplayRow(
        id=earthquake.id,
        is_major=is_major(earthquake.magnitude),
        date_label=format_event_date(earthquake, locale, tz),
        magnitude=earthquake.magnitude,
        place=earthquake.place,
        latitude=_round_coordinate(earthquake.latitude),
        longitude=_round_coordinate(earthquake.longitude),
        details_url=earthquake.url,
    )


def build_rows(
    earthquakes: list[Earthquake] | tuple[Earthquake, ...],
    filter_spain: bool,
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = timezone.utc,
) -> list[DisplayRow]:
    """Filter, sort and map events into table rows.

    Pure function: the input sequence is not modified.

    Args:
        earthquakes: Events from the last successful fetch
        filter_spain: Keep only events mentioning Spain when True
        locale: Babel locale for the date column
        tz: Timezone the event dates are shown in

    Returns:
        Rows sorted by magnitude, largest first
    """
    retained = sort_by_magnitude(filter_events(earthquakes, filter_spain))
    return [build_row(e, locale, tz) for e in retained]


def toggle_label(filter_spain: bool) -> str:
    """Label of the filter toggle for the current filter mode."""
    if filter_spain:
        return "Show All Locations"
    return "Show Only Spain Locations"


def summary_text(count: int, filter_spain: bool, start_year: int) -> str:
    """Sentence under the table describing what is shown.

    Pure function.
    """
    scope = "with Spain in location" if filter_spain else "in Spain"
    return f"Showing {count} earthquakes {scope} since {start_year}."


def format_last_update(
    moment: datetime,
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = timezone.utc,
) -> str:
    """Full date plus medium time, e.g. 'sábado, 18 de octubre de 2026, 10:15:02'.

    Pure function.
    """
    local = moment.astimezone(tz)
    date_part = format_date(local.date(), format="full", locale=locale)
    time_part = format_time(local, format="medium", tzinfo=tz, locale=locale)
    return f"{date_part}, {time_part}"


def build_page_view(
    state: DisplayState,
    window: QueryWindow,
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = timezone.utc,
) -> PageView:
    """Derive the page from the display state.

    Pure function. While loading, neither the error nor the table is
    shown; while an error is shown, the table is hidden even if older
    events are still held in state.

    Args:
        state: Current display state
        window: Query window (for the start year)
        locale: Babel locale for dates
        tz: Timezone dates are shown in

    Returns:
        PageView ready for rendering
    """
    show_error = not state.is_loading and state.error_message is not None
    show_table = not state.is_loading and state.error_message is None

    rows: tuple[DisplayRow, ...] = ()
    if show_table:
        rows = tuple(build_rows(state.events, state.filter_spain, locale, tz))

    last_update_label = None
    if state.last_update is not None:
        last_update_label = format_last_update(state.last_update, locale, tz)

    return PageView(
        title=TITLE,
        show_loading=state.is_loading,
        error_message=state.error_message if show_error else None,
        show_table=show_table,
        rows=rows,
        filter_spain=state.filter_spain,
        toggle_label=toggle_label(state.filter_spain),
        summary=summary_text(len(rows), state.filter_spain, window.start_year),
        last_update_label=last_update_label,
        start_year=window.start_year,
    )
