"""
FastAPI application factory for the vehicle analysis control surface.

Routes:
- /api/* -> REST API over the analysis controller
"""

from __future__ import annotations

from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pipeline.controller import AnalysisController
from .routes import api


def create_app(
    controller: AnalysisController,
    cors_origins: Optional[Sequence[str]] = None,
) -> FastAPI:
    """
    Create the FastAPI app bound to one analysis controller.

    Args:
        controller: Controller served by the /api routes.
        cors_origins: Browser origins allowed to call the API; none when empty.
    """
    app = FastAPI(
        title="Vehicle Lens",
        version="0.1.0",
        description="Vehicle detection and color analysis",
    )

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.controller = controller
    app.include_router(api.router, prefix="/api")

    @app.on_event("shutdown")
    def _release() -> None:
        controller.unload()

    return app
