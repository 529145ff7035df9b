from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from hypercorn.asyncio import serve
from hypercorn.config import Config

from ..api import UnknownFunctionError, call_api, get_api_function, get_api_functions
from ..api.serializers import serialize_event
from ..domain import (
    CapacityError,
    ClashError,
    LedgerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="UniVerse Events API", version="1.0.0")


def _ledger_error_response(exc: LedgerError) -> HTTPException:
    detail: Dict[str, Any] = {"error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail={**detail, "event_id": exc.event_id})
    if isinstance(exc, ClashError):
        return HTTPException(status_code=409, detail={**detail, "conflict": serialize_event(exc.conflict)})
    if isinstance(exc, CapacityError):
        return HTTPException(status_code=409, detail={**detail, "event": serialize_event(exc.event)})
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=detail)
    if isinstance(exc, PersistenceError):
        logger.error("Persistence failure: %s", exc)
        return HTTPException(status_code=503, detail=detail)
    return HTTPException(status_code=500, detail=detail)


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/functions")
def list_functions() -> Dict[str, Any]:
    return {"functions": [spec.describe() for spec in get_api_functions()]}


@app.post("/api/functions/{name}")
def invoke_function(name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    arguments = payload.get("arguments") or {}
    if not isinstance(arguments, dict):
        raise HTTPException(status_code=400, detail="arguments must be an object")
    try:
        spec = get_api_function(name)
    except UnknownFunctionError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    try:
        spec.bind(arguments)
    except TypeError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid arguments for {name}: {exc}") from exc
    try:
        result = call_api(name, **arguments)
    except LedgerError as exc:
        logger.debug("%s rejected: %s", name, exc)
        raise _ledger_error_response(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"result": result}


async def _serve(config: Config) -> None:
    await serve(app, config)


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving UniVerse API on %s:%s", host, port)
    asyncio.run(_serve(config))
