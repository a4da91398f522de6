# calendar_optimizer/main.py
"""FastAPI application exposing the calendar optimization routes."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from . import __version__
from .core.exceptions import DomainException
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.calendar_optimization import router as calendar_optimization_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Calendar Optimizer", version=__version__)
    app.include_router(calendar_optimization_router)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        logger.warning(f"{request.method} {request.url.path} failed: {exc.code}")
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=prometheus_metrics.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
