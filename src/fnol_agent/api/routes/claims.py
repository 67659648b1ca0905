"""FNOL intake API routes.

Endpoints
---------
POST /api/v1/claims/parse-text
    Accept ``{"text": "..."}``, extract fields and return a ``RoutingResult``.

POST /api/v1/claims/upload
    Accept a multipart ``file`` (``.txt`` / ``.pdf``), decode it and route it.

GET  /api/v1/health
    Lightweight health-check.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from fnol_agent.core.errors import FnolError, InputUnavailable
from fnol_agent.core.ingestion import decode_bytes
from fnol_agent.core.routing import extract_and_route

router = APIRouter()


class ParseTextRequest(BaseModel):
    """Body of ``POST /claims/parse-text``."""

    text: Optional[str] = Field(default=None, description="Raw FNOL document text")


def _error_response(exc: FnolError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": exc.kind},
    )


# ---------------------------------------------------------------------------
# POST /claims/parse-text
# ---------------------------------------------------------------------------

@router.post(
    "/claims/parse-text",
    summary="Route FNOL text",
    description="Extract claim fields from raw text and recommend a processing route.",
)
async def parse_text(body: ParseTextRequest, request: Request) -> Any:
    """Run extraction and routing on text posted directly."""
    if not body.text or not body.text.strip():
        return _error_response(InputUnavailable('Missing "text" in request body'))

    logger.info("API: received {n} chars of text", n=len(body.text))
    result = extract_and_route(body.text, request.app.state.routing)
    return result.to_json_dict()


# ---------------------------------------------------------------------------
# POST /claims/upload
# ---------------------------------------------------------------------------

@router.post(
    "/claims/upload",
    summary="Route an FNOL document",
    description="Upload a .txt or .pdf FNOL document under the form field 'file'.",
)
async def upload_document(request: Request, file: Optional[UploadFile] = File(default=None)) -> Any:
    """Store the upload, decode it, route it and always remove the stored copy."""
    if file is None or not file.filename:
        return _error_response(InputUnavailable("No file uploaded"))

    upload_dir = Path(request.app.state.cfg.data.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    stored = upload_dir / f"{int(time.time() * 1000)}-{Path(file.filename).name}"

    try:
        data = await file.read()
        stored.write_bytes(data)
        logger.info("API: stored upload {name} ({n} bytes)", name=stored.name, n=len(data))

        try:
            document = decode_bytes(data, file.filename)
        except FnolError as exc:
            logger.warning(
                "API: rejected upload {name} ({kind}): {err}",
                name=file.filename,
                kind=exc.kind,
                err=exc,
            )
            return _error_response(exc)

        strip_noise = bool(request.app.state.cfg.ingestion.strip_pdf_noise) and document.converted
        result = extract_and_route(document.text, request.app.state.routing, strip_noise=strip_noise)
    finally:
        stored.unlink(missing_ok=True)
        await file.close()

    return result.to_json_dict()


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------

@router.get(
    "/health",
    summary="Health check",
    description="Returns service health status and the active fast-track threshold.",
)
async def health(request: Request) -> dict:
    """Return a lightweight health-check response."""
    return {
        "status": "healthy",
        "fast_track_threshold": request.app.state.routing.fast_track_threshold,
    }
