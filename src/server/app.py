"""
Life Tracker — Cloud Sync API.

GET  /api/health            → {"ok": true, "time": ISO timestamp}
POST /api/sync/save         → {"ok": true}     body {"userId": str, "data": object}
GET  /api/sync/load?userId= → {"data": object}

Errors are always {"error": str}: 400 bad request, 404 unknown id,
413 body too large, 500 storage failure. Handlers are plain `def` so
FastAPI runs the SQLite calls in its thread pool.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.data.db import UserDataDB

logger = logging.getLogger(__name__)

PAYLOAD_TOO_LARGE = "payload too large"


class SaveRequest(BaseModel):
    userId: str = Field(min_length=1)
    data: dict


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


class BodySizeLimitMiddleware:
    """413 for request bodies over max_bytes.

    Content-Length is checked up front; chunked bodies are counted as they
    are read, and the route sees an HTTPException once the limit is passed.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length is not None and length.isdigit() and int(length) > self.max_bytes:
            logger.warning("Rejected %s %s: body of %s bytes", scope["method"], scope["path"], length)
            await _error(413, PAYLOAD_TOO_LARGE)(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning("Rejected %s %s: streamed body over %d bytes",
                                   scope["method"], scope["path"], self.max_bytes)
                    raise HTTPException(status_code=413, detail=PAYLOAD_TOO_LARGE)
            return message

        await self.app(scope, limited_receive, send)


def create_app(
    db: UserDataDB | None = None,
    cors_origins: list[str] | None = None,
    max_body_bytes: int | None = None,
) -> FastAPI:
    """Build the sync API. Settings fill in anything not passed explicitly."""
    from src.config import settings

    if cors_origins is None:
        cors_origins = settings.CORS_ORIGINS
    if max_body_bytes is None:
        max_body_bytes = settings.MAX_BODY_BYTES

    app = FastAPI(title="Life Tracker Sync API")
    app.state.db = db

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_db() -> UserDataDB:
        if app.state.db is None:
            app.state.db = UserDataDB()
        return app.state.db

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _format_validation_error(exc))

    @app.get("/api/health")
    def health() -> dict:
        return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}

    @app.post("/api/sync/save")
    def save(body: SaveRequest):
        try:
            get_db().save(body.userId, body.data)
        except sqlite3.Error:
            logger.exception("save error for user '%s'", body.userId)
            return _error(500, "Failed to save")
        return {"ok": True}

    @app.get("/api/sync/load")
    def load(userId: str = ""):
        if not userId:
            return _error(400, "userId required")
        try:
            data = get_db().load(userId)
        except sqlite3.Error:
            logger.exception("load error for user '%s'", userId)
            return _error(500, "Failed to load")
        if data is None:
            return _error(404, "not found")
        return {"data": data}

    return app
