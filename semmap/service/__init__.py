"""HTTP service mode for building and querying semantic maps."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
