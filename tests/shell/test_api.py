"""Tests for the FastAPI web surface.

The USGS feed is mocked with `responses`; pages are fetched with
FastAPI's TestClient. Background tasks run before TestClient returns,
so a page rendered in the same request as a fetch starts still shows
the loading state.
"""

from datetime import datetime, timezone

import pytest
import requests
import responses
from fastapi.testclient import TestClient

from spain_quakes.api import create_app
from spain_quakes.core.config import Config, USGS_API_BASE
from spain_quakes.presenter import Presenter


NOW = datetime(2026, 10, 18, 10, 0, 0, tzinfo=timezone.utc)

FEED = {
    "type": "FeatureCollection",
    "features": [
        {
            "id": "li",
            "properties": {
                "mag": 3.1,
                "place": "Lisbon, Portugal",
                "time": 1703001700000,
                "url": "https://earthquake.usgs.gov/earthquakes/eventpage/li",
            },
            "geometry": {"coordinates": [-9.1393, 38.7223, 8.0]},
        },
        {
            "id": "gr",
            "properties": {
                "mag": 6.2,
                "place": "Granada, Spain",
                "time": 1703001600000,
                "url": "https://earthquake.usgs.gov/earthquakes/eventpage/gr",
            },
            "geometry": {"coordinates": [-3.5986, 37.1773, 10.0]},
        },
    ],
}


@pytest.fixture
def client():
    config = Config(timezone="UTC")
    presenter = Presenter(config, clock=lambda: NOW)
    return TestClient(create_app(config, presenter))


@pytest.fixture
def feed():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _rows(client):
    return [row["id"] for row in client.get("/api/earthquakes").json()["earthquakes"]]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestIndex:
    def test_first_visit_shows_loading(self, client, feed):
        """The request that mounts the page renders before the fetch resolves."""
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)

        response = client.get("/")

        assert response.status_code == 200
        assert "Earthquakes in Spain" in response.text
        assert "Loading..." in response.text
        assert "<table" not in response.text

    def test_second_visit_shows_table(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)

        client.get("/")
        response = client.get("/")

        assert "Loading..." not in response.text
        assert "<table" in response.text
        assert response.text.index("Granada, Spain") < response.text.index("Lisbon, Portugal")
        assert len(feed.calls) == 1

    def test_fetch_is_not_repeated_on_reload(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)

        for _ in range(3):
            client.get("/")

        assert len(feed.calls) == 1


class TestToggleFilter:
    def test_toggle_filters_without_fetching(self, client, feed):
        """Default shows both rows; after toggling only Granada remains."""
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)
        client.get("/")

        assert _rows(client) == ["gr", "li"]

        response = client.post("/toggle-filter", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

        page = client.get("/")
        assert "Show All Locations" in page.text
        assert _rows(client) == ["gr"]
        assert len(feed.calls) == 1

    def test_toggle_twice_restores(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)
        client.get("/")

        client.post("/toggle-filter")
        client.post("/toggle-filter")

        assert _rows(client) == ["gr", "li"]
        assert "Show Only Spain Locations" in client.get("/").text


class TestRefresh:
    def test_error_then_refresh_recovers(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, body=requests.ConnectionError("Network Error"))
        client.get("/")

        page = client.get("/")
        assert "Network Error" in page.text
        assert "<table" not in page.text

        feed.replace(responses.GET, USGS_API_BASE, json=FEED, status=200)
        response = client.post("/refresh", follow_redirects=False)
        assert response.status_code == 303

        page = client.get("/")
        assert "Network Error" not in page.text
        assert "<table" in page.text

    def test_malformed_feed_shows_error(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json={"features": 5}, status=200)
        client.get("/")

        page = client.get("/")

        assert "Loading..." not in page.text
        assert "Failed to fetch data" in page.text
        assert "Refresh Results" in page.text

    def test_refresh_before_first_visit_mounts(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)

        client.post("/refresh")
        client.get("/")

        assert len(feed.calls) == 1
        assert _rows(client) == ["gr", "li"]


class TestJson:
    def test_json_while_loading(self, client):
        data = client.get("/api/earthquakes").json()

        assert data["loading"] is True
        assert data["earthquakes"] == []
        assert data["start_year"] == 1976

    def test_json_after_fetch(self, client, feed):
        feed.add(responses.GET, USGS_API_BASE, json=FEED, status=200)
        client.get("/")

        data = client.get("/api/earthquakes").json()

        assert data["loading"] is False
        assert data["error"] is None
        assert data["count"] == 2
        assert data["summary"] == "Showing 2 earthquakes in Spain since 1976."
        assert data["earthquakes"][0]["is_major"] is True
        assert data["earthquakes"][0]["latitude"] == 37.18
        assert data["earthquakes"][1]["is_major"] is False
        assert data["last_update"].startswith("2026-10-18T10:00:00")
