from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from artifact_dao.api import governance, health

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="artifact_dao governance API")

    # CORS, tighten in prod if needed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(governance.router)

    log.info("governance API routes registered")
    return app


app = create_app()
