"""API routers for the NFSv4 exporter."""

from .exposition import exposition_router

__all__ = ["exposition_router"]
