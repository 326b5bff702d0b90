import logging

import uvicorn
from fastapi import FastAPI

from app.config import settings
from app.dashboard.goals_router import router as goals_router
from app.dashboard.router import router as dashboard_router
from app.static import mount_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Clinic Sales Dashboard", version="0.1.0")
app.include_router(dashboard_router)
app.include_router(goals_router)


@app.get("/api")
async def api_index() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": {
            "dashboard": "/api/dashboard?year={year}&month={month}",
            "metrics": "/api/metrics",
            "goals": "/api/goals/{year}",
            "goals_edit": "/api/goals/{year}/edit",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


# Catch-all; keep last.
mount_client(app, settings.dist_dir)


def run() -> None:
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
