"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS API client (HTTP)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from spain_quakes.shell.usgs_client import USGSClient, FetchResult
from spain_quakes.shell.config_loader import load_config, Config

__all__ = [
    "USGSClient",
    "FetchResult",
    "load_config",
    "Config",
]
