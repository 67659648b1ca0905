"""FastAPI application factory.

``create_app`` builds a fully configured ``FastAPI`` instance with:

* CORS middleware
* Request-logging / exception-handling middleware
* FNOL intake routes
* Lifespan manager that prepares the upload directory
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from fnol_agent.api.middleware import ExceptionHandlerMiddleware, RequestLoggingMiddleware
from fnol_agent.api.routes.claims import router as claims_router
from fnol_agent.logging.setup import setup_logging
from fnol_agent.schemas.routing import RoutingConfig

if TYPE_CHECKING:
    from omegaconf import DictConfig


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle for the FastAPI application."""
    cfg: DictConfig = app.state.cfg

    upload_dir = Path(cfg.data.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Uploads are staged in {path}", path=upload_dir)

    logger.info("Application startup complete")
    yield
    logger.info("Application shutting down")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_app(cfg: DictConfig) -> FastAPI:
    """Build and return a fully configured :class:`FastAPI` application.

    Parameters
    ----------
    cfg:
        The merged Hydra configuration.

    Returns
    -------
    FastAPI
        Ready-to-run application instance.
    """
    # ── Logging ──────────────────────────────────────────────────────────
    setup_logging(cfg.logging)

    # ── App ──────────────────────────────────────────────────────────────
    app = FastAPI(
        title="FNOL Agent",
        description="First-Notice-of-Loss field extraction and claim routing",
        version="1.0.0",
        lifespan=_lifespan,
    )

    # Store config in app state for access in lifespan & routes
    app.state.cfg = cfg

    # ── Routing rules ────────────────────────────────────────────────────
    app.state.routing = RoutingConfig.from_cfg(cfg.get("routing"))
    logger.info(
        "Routing rules loaded: {n} mandatory fields, threshold={t}",
        n=len(app.state.routing.mandatory_fields),
        t=app.state.routing.fast_track_threshold,
    )

    # ── CORS ─────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.server.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Custom middleware (outermost = first to run) ─────────────────────
    app.add_middleware(ExceptionHandlerMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # ── Routes ───────────────────────────────────────────────────────────
    app.include_router(claims_router, prefix="/api/v1")

    return app
