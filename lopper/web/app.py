"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from lopper import __version__
from lopper.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="lopper", version=__version__)
    app.include_router(router)
    return app
