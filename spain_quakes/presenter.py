"""Presenter - Wires Functional Core and Imperative Shell.

This module owns the display state of one table session and coordinates
the flow: user action -> state transition (core reducer) -> page
derivation (core view model) -> HTML (Jinja2 template).

The USGS request itself runs outside the state lock, so a page can be
rendered while a fetch is in flight.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from babel.dates import get_timezone
from jinja2 import Environment, PackageLoader, select_autoescape

from spain_quakes.core.config import Config
from spain_quakes.core.query import QueryWindow, build_query_window, years_before
from spain_quakes.core.state import (
    Action,
    DisplayState,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    FilterToggled,
    reduce,
)
from spain_quakes.core.view_model import (
    COLUMNS,
    DETAILS_LABEL,
    LAST_UPDATE_PREFIX,
    LOADING_TEXT,
    REFRESH_LABEL,
    PageView,
    build_page_view,
)
from spain_quakes.shell.usgs_client import FetchResult, USGSClient


logger = logging.getLogger(__name__)


_templates = Environment(
    loader=PackageLoader("spain_quakes", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def render_page(view: PageView) -> str:
    """Render a page view to HTML."""
    template = _templates.get_template("index.html")
    return template.render(
        view=view,
        columns=COLUMNS,
        loading_text=LOADING_TEXT,
        refresh_label=REFRESH_LABEL,
        last_update_prefix=LAST_UPDATE_PREFIX,
        details_label=DETAILS_LABEL,
    )


class Presenter:
    """Coordinates fetching, state and rendering for one session.

    This class wires together:
    - USGS client (fetches earthquake data)
    - Core reducer (state transitions)
    - Core view model (rows, labels, summary)
    - Jinja2 template (HTML)
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize presenter with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            clock: Returns the current aware datetime (UTC by default)
        """
        self.config = config
        self.usgs_client = usgs_client or USGSClient(
            base_url=config.usgs_api_base,
            timeout=config.request_timeout_seconds,
        )
        self.clock = clock or _utc_now
        self.tz = get_timezone(config.timezone)

        # Start of the window is fixed for the lifetime of the session
        self.start_date = years_before(self._today(), config.years_back)

        self._state = DisplayState()
        self._lock = threading.Lock()
        self._generation = 0
        self._mounted = False

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    def _today(self):
        return self.clock().astimezone(self.tz).date()

    def query_window(self) -> QueryWindow:
        """Window for a fetch starting now (end date recomputed)."""
        return build_query_window(
            today=self._today(),
            years_back=self.config.years_back,
            bounds=self.config.bounds,
            limit=self.config.result_limit,
            start_date=self.start_date,
        )

    def dispatch(self, action: Action) -> DisplayState:
        """Apply an action to the session state.

        Single mutation point for the display state.
        """
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    def begin_fetch(self) -> int:
        """Mark a fetch as started and return its generation."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._state = reduce(self._state, FetchStarted(generation))

        logger.debug("Fetch %d started", generation)
        return generation

    def complete_fetch(self, generation: int) -> DisplayState:
        """Run the USGS query for a started fetch and record the outcome.

        A result belonging to a fetch that has since been superseded by a
        newer one is discarded by the reducer.

        Args:
            generation: Value returned by begin_fetch()

        Returns:
            State after the outcome was applied
        """
        window = self.query_window()
        try:
            result = self.usgs_client.fetch(window)
        except Exception:
            # The session must leave the loading state whatever the client does
            logger.exception("Unexpected error in fetch %d", generation)
            result = FetchResult.failure(None)

        if result.ok:
            logger.info(
                "Fetch %d completed with %d earthquakes",
                generation,
                len(result.events),
            )
            action: Action = FetchSucceeded(
                generation=generation,
                events=result.events,
                completed_at=self.clock(),
            )
        else:
            logger.warning("Fetch %d failed: %s", generation, result.error)
            action = FetchFailed(generation=generation, message=result.error)

        state = self.dispatch(action)
        if state.fetch_generation != generation:
            logger.info("Fetch %d superseded by %d, result dropped", generation, state.fetch_generation)
        return state

    def mount(self) -> int | None:
        """Start the initial fetch.

        Only the first call starts a fetch; later calls return None.

        Returns:
            Generation of the initial fetch, or None if already mounted
        """
        with self._lock:
            if self._mounted:
                return None
            self._mounted = True

        logger.info("Mounting earthquake table, window starts %s", self.start_date)
        return self.begin_fetch()

    def refresh(self) -> DisplayState:
        """Fetch again with the same window and an end date of today."""
        return self.complete_fetch(self.begin_fetch())

    def toggle_filter(self) -> DisplayState:
        """Flip the Spain filter. Does not fetch."""
        state = self.dispatch(FilterToggled())
        logger.info("Spain filter %s", "on" if state.filter_spain else "off")
        return state

    def view(self) -> PageView:
        """Derive the current page from the session state."""
        return build_page_view(
            self._state,
            self.query_window(),
            locale=self.config.locale,
            tz=self.tz,
        )

    def render(self) -> str:
        """Render the current page to HTML."""
        return render_page(self.view())
