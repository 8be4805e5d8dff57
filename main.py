import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import engine, init_db
from api.applications import router as applications_router
from api.dashboard import router as dashboard_router
from api.deps import verify_apikey
from api.live import router as live_router
from api.profiles import router as profiles_router
from utils.logging_setup import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up: initializing %s database...", "SQLite" if settings.is_sqlite else "PostgreSQL")
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Application submission and review API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(applications_router, dependencies=[Depends(verify_apikey)])
app.include_router(profiles_router, dependencies=[Depends(verify_apikey)])
app.include_router(dashboard_router, dependencies=[Depends(verify_apikey)])
app.include_router(live_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
