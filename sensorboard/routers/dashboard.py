# -*- coding: utf-8 -*-
# sensorboard/routers/dashboard.py - REST API for the dashboard view model
from fastapi import APIRouter, HTTPException

from sensorboard.core.dashboard import Dashboard
from sensorboard.core.schemas import DashboardDTO, RangeSelectDTO


def _dashboard() -> Dashboard:
    """Lazy reference to the dashboard instance from FastAPI app."""
    from sensorboard.app import dashboard  # lazy import to avoid circular deps

    if dashboard is None:
        raise HTTPException(status_code=503, detail="Dashboard not ready")
    return dashboard


router = APIRouter()


@router.get("/state", response_model=DashboardDTO)
def get_state():
    return _dashboard().snapshot()


@router.post("/range", response_model=DashboardDTO)
async def select_range(payload: RangeSelectDTO):
    board = _dashboard()
    await board.select_range(payload.range)
    return board.snapshot()


@router.post("/refresh", response_model=DashboardDTO)
async def refresh():
    board = _dashboard()
    await board.refresh()
    return board.snapshot()


@router.post("/relay/mode", response_model=DashboardDTO)
async def toggle_relay_mode():
    board = _dashboard()
    await board.relay.toggle_mode()
    return board.snapshot()


@router.post("/relay/status", response_model=DashboardDTO)
async def toggle_relay_status():
    board = _dashboard()
    await board.relay.toggle_status()
    return board.snapshot()
