"""ASGI Entry Point - Root Module.

This is the root-level entry point for `uvicorn main:app`.
It imports from the spain_quakes package.
"""

from spain_quakes.main import build_app, run

app = build_app()

__all__ = [
    "app",
    "run",
]
