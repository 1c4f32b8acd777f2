# -*- coding: utf-8 -*-
# sensorboard/app.py - FastAPI/uvicorn entry point
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sensorboard.core.config import settings
from sensorboard.core.dashboard import Dashboard
from sensorboard.core.upstream import UpstreamClient
from sensorboard.routers import api, dashboard as dashboard_router, ws

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="SensorBoard", version="1.0.0")

# CORS (the page may be served from another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Static frontend (optional)
if os.path.isdir(settings.frontend_dir):
    app.mount("/static", StaticFiles(directory=settings.frontend_dir), name="static")
else:
    logger.info("Static frontend directory not found; skipping /static mount")

# Routers
app.include_router(api.router, prefix="/api", tags=["proxy"])
app.include_router(dashboard_router.router, prefix="/dashboard", tags=["dashboard"])
app.include_router(ws.router, tags=["ws"])

# Runtime objects
upstream: UpstreamClient = None
dashboard: Dashboard = None


@app.on_event("startup")
async def on_startup():
    global upstream, dashboard
    upstream = UpstreamClient()
    logger.info("Upstream service: %s", upstream.base_url)

    # Relay polling + first load of cards and chart
    dashboard = Dashboard(upstream)
    dashboard.start()


@app.on_event("shutdown")
async def on_shutdown():
    global upstream, dashboard
    if dashboard:
        await dashboard.stop()
        dashboard = None
    if upstream:
        await upstream.aclose()
        upstream = None


@app.get("/")
async def index():
    return {"ok": True, "message": "SensorBoard backend running. Open /static/index.html"}
