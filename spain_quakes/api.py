"""Earthquake table API - FastAPI service.

Serves the Spain earthquake table as an HTML page plus a JSON view of the
same data. The page's two buttons post to /toggle-filter and /refresh.

USGS requests run as background tasks, so the response that starts a
fetch shows the loading page and the browser reloads until it completes.
"""

import logging
from datetime import datetime

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from spain_quakes.core.config import Config
from spain_quakes.core.view_model import PageView
from spain_quakes.presenter import Presenter


logger = logging.getLogger(__name__)


# ===== Response Models =====

class RowModel(BaseModel):
    id: str
    is_major: bool
    date_label: str
    magnitude: float | None
    place: str | None
    latitude: float | None
    longitude: float | None
    details_url: str


class PageModel(BaseModel):
    title: str
    loading: bool
    error: str | None
    filter_spain: bool
    toggle_label: str
    summary: str
    start_year: int
    last_update: datetime | None
    last_update_label: str | None
    count: int
    earthquakes: list[RowModel]


def _page_to_model(view: PageView, last_update: datetime | None) -> PageModel:
    """Convert a PageView to its JSON response model."""
    return PageModel(
        title=view.title,
        loading=view.show_loading,
        error=view.error_message,
        filter_spain=view.filter_spain,
        toggle_label=view.toggle_label,
        summary=view.summary,
        start_year=view.start_year,
        last_update=last_update,
        last_update_label=view.last_update_label,
        count=len(view.rows),
        earthquakes=[
            RowModel(
                id=row.id,
                is_major=row.is_major,
                date_label=row.date_label,
                magnitude=row.magnitude,
                place=row.place,
                latitude=row.latitude,
                longitude=row.longitude,
                details_url=row.details_url,
            )
            for row in view.rows
        ],
    )


def _get_presenter(request: Request) -> Presenter:
    return request.app.state.presenter


def _start_fetch(presenter: Presenter, background_tasks: BackgroundTasks) -> int:
    """Begin a fetch now and complete it after the response is sent."""
    generation = presenter.mount()
    if generation is None:
        generation = presenter.begin_fetch()
    background_tasks.add_task(presenter.complete_fetch, generation)
    return generation


def create_app(
    config: Config | None = None,
    presenter: Presenter | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration (defaults if not provided)
        presenter: Session presenter (created from config if not provided)

    Returns:
        Configured FastAPI app
    """
    config = config or Config()

    app = FastAPI(
        title="Spain Earthquakes",
        description="Earthquakes in Spain over the last 50 years, from USGS",
        version="1.0.0",
    )
    app.state.presenter = presenter or Presenter(config)

    # ===== Page Endpoints =====

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, background_tasks: BackgroundTasks):
        """Render the table, starting the initial fetch on first visit."""
        presenter = _get_presenter(request)

        generation = presenter.mount()
        if generation is not None:
            background_tasks.add_task(presenter.complete_fetch, generation)

        return HTMLResponse(presenter.render())

    @app.post("/toggle-filter")
    def toggle_filter(request: Request):
        """Flip the Spain filter without fetching."""
        _get_presenter(request).toggle_filter()
        return RedirectResponse(url="/", status_code=303)

    @app.post("/refresh")
    def refresh(request: Request, background_tasks: BackgroundTasks):
        """Fetch again with an end date of today."""
        generation = _start_fetch(_get_presenter(request), background_tasks)
        logger.info("Refresh requested, fetch %d", generation)
        return RedirectResponse(url="/", status_code=303)

    # ===== JSON Endpoints =====

    @app.get("/api/earthquakes", response_model=PageModel)
    def get_earthquakes(request: Request):
        """Current table contents as JSON."""
        presenter = _get_presenter(request)
        return _page_to_model(presenter.view(), presenter.state.last_update)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
