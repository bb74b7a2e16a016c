"""FastAPI application for the NFSv4 exporter."""

from fastapi import FastAPI

from . import __version__
from .api import exposition_router
from .config import Settings, settings as default_settings
from .exporter import Exporter


def create_app(settings: Settings | None = None, exporter: Exporter | None = None) -> FastAPI:
    """
    Build the exporter application.

    Args:
        settings: Startup configuration (environment-derived defaults if None)
        exporter: Pre-built exporter, mainly for tests

    Returns:
        FastAPI app serving `/` and `/metrics`
    """
    settings = settings or default_settings
    app = FastAPI(
        title="NFSv4 Exporter",
        description="Prometheus exporter for Linux NFSv4 server statistics",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.exporter = exporter or Exporter(settings)
    app.include_router(exposition_router)
    return app


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(),
        host=default_settings.ip_address,
        port=default_settings.port,
    )
