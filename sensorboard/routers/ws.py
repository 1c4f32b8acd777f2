# -*- coding: utf-8 -*-
# sensorboard/routers/ws.py - WebSocket (dashboard snapshot push)
import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from sensorboard.core.config import DASHBOARD

router = APIRouter()


@router.websocket("/ws")
async def ws_endpoint(ws: WebSocket):
    from sensorboard.app import dashboard

    await ws.accept()
    if dashboard is None:
        await ws.close(code=1013)
        return
    try:
        while True:
            await ws.send_json(dashboard.snapshot())
            await asyncio.sleep(float(DASHBOARD["push_interval_s"]))
    except WebSocketDisconnect:
        return
