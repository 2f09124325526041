"""Earthquakes in Spain over the last 50 years, from the USGS event feed."""

__version__ = "1.0.0"
