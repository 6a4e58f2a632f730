# journaling api
# fastapi app with async mongodb, jwt auth, and gemini-backed entry analysis

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journaling_app.config import settings
from journaling_app.services.db import db
from journaling_app.routers import (
    auth,
    journals,
    transcribe,
    check_ins,
    people,
    finance,
    tasks,
    goals,
    wheel_of_life,
    soul_matrix,
    insights,
    nudges,
    recaps,
    analytics,
    analysis,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: close connection."""
    logger.info("Starting journaling backend...")
    await db.connect()
    logger.info("Journaling backend ready")
    yield
    logger.info("Shutting down journaling backend...")
    await db.close()


app = FastAPI(
    title="Journaling API",
    description="Backend API for the journaling app — entries, entity extraction, check-ins, insights and nudges",
    version="0.1.0",
    lifespan=lifespan,
)

# cors — allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(auth.router)
app.include_router(journals.router)
app.include_router(transcribe.router)
app.include_router(check_ins.router)
app.include_router(people.router)
app.include_router(finance.router)
app.include_router(tasks.router)
app.include_router(goals.router)
app.include_router(wheel_of_life.router)
app.include_router(soul_matrix.router)
app.include_router(insights.router)
app.include_router(nudges.router)
app.include_router(recaps.router)
app.include_router(analytics.router)
app.include_router(analysis.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "journaling-api"}
