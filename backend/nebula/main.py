"""
NEBULA API
==========
FastAPI application entry point. Mount routers here.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nebula.config import get_settings
from nebula.routers import quests, reflections

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="NEBULA API",
    description="Quest recommendations and reflection analysis for NEBULA ODYSSEY",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quests.router)
app.include_router(reflections.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "nebula-api"}
