# -*- coding: utf-8 -*-
# sensorboard/routers/api.py - pass-through proxy to the upstream IoT service
import logging
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sensorboard.core.schemas import ErrorDTO
from sensorboard.core.upstream import UpstreamClient, UpstreamError

logger = logging.getLogger(__name__)


def _upstream() -> Optional[UpstreamClient]:
    """Lazy reference to the upstream client created at app startup."""
    from sensorboard.app import upstream  # lazy import to avoid circular deps

    return upstream


def _failure(message: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=500, content=content)


async def _forward(call: Callable[[UpstreamClient], Awaitable], message: str) -> JSONResponse:
    client = _upstream()
    if client is None:
        logger.warning("%s: upstream client not ready", message)
        return _failure(message)
    try:
        data = await call(client)
    except UpstreamError as exc:
        logger.warning("%s: %s", message, exc)
        return _failure(message)
    return JSONResponse(content=data)


async def _forward_update(request: Request, method: str) -> JSONResponse:
    message = "Failed to update relay"
    try:
        body = await request.json()
    except ValueError:
        return _failure(message, "Request body is not valid JSON")
    if not isinstance(body, dict):
        return _failure(message, "Request body must be a JSON object")
    logger.info("%s relay request body: %s", method, body)

    client = _upstream()
    if client is None:
        return _failure(message, "Upstream client not ready")
    try:
        data = await client.update_relay(body, method=method)
    except UpstreamError as exc:
        logger.warning("Relay %s error: %s", method, exc)
        return _failure(message, str(exc))
    logger.info("%s relay success: %s", method, data)
    return JSONResponse(content=data)


router = APIRouter(responses={500: {"model": ErrorDTO}})


@router.get("/humidity")
async def get_humidity():
    return await _forward(lambda c: c.get_humidity(), "Failed to fetch humidity")


@router.get("/statistik")
async def get_statistik():
    return await _forward(lambda c: c.get_statistik(), "Failed to fetch statistik")


@router.get("/celcius")
async def get_celcius():
    return await _forward(lambda c: c.get_celcius(), "Failed to fetch celcius")


@router.get("/relay")
async def get_relay():
    return await _forward(lambda c: c.get_relay(), "Failed to fetch relay status")


@router.put("/relay")
async def put_relay(request: Request):
    return await _forward_update(request, "PUT")


@router.patch("/relay")
async def patch_relay(request: Request):
    return await _forward_update(request, "PATCH")
