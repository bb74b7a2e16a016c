"""Prometheus exposition endpoints."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST

from ..exporter import Exporter

exposition_router = APIRouter(tags=["exposition"])


def get_exporter(request: Request) -> Exporter:
    """Return the Exporter created at application startup."""
    return request.app.state.exporter


@exposition_router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    """Liveness placeholder, always an empty body."""
    return ""


@exposition_router.get("/metrics")
async def metrics(request: Request) -> Response:
    """
    Read the kernel statistics and return them in the Prometheus text format.

    A failed scrape still answers 200: the previous values are served with
    nfsv4_exporter_scrape_success set to 0.
    """
    exporter = get_exporter(request)
    await exporter.scrape()
    return Response(content=exporter.metrics.render(), media_type=CONTENT_TYPE_LATEST)
