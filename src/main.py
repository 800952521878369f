from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.adapters.api.controllers.routes import router as routes_router
from src.config import env_bool
from src.domain.exceptions import TransitImportError

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Transit lane import")
app.include_router(routes_router)


def _error_detail(exc: Exception) -> str:
    if env_bool("TRANSIT_IMPORT_REVEAL_ERRORS"):
        return str(exc) or exc.__class__.__name__
    if isinstance(exc, ValidationError):
        # A stored route that no longer matches the schema.
        return "Stored route is unreadable"
    if isinstance(exc, (BotoCoreError, ClientError)):
        return "Route store unavailable"
    if isinstance(exc, (TransitImportError, RuntimeError)):
        return str(exc) or exc.__class__.__name__
    return "Internal Server Error"


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report failures as JSON, never as Starlette's plain-text 500 page."""

    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})
    return JSONResponse(status_code=500, content={"detail": _error_detail(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
