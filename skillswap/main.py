# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillswap.config import build_sqlalchemy_db_url, settings
from skillswap.database import Base, engine
from skillswap import models  # noqa: F401  registers tables on Base.metadata
from skillswap.api.routes.health import router as health_router
from skillswap.routers import admin, auth, global_messages, profile, ratings, requests, skills, users
from skillswap.services.metrics import MetricsCollector


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One collector per application; routes reach it via request.app.state.
        app.state.metrics = MetricsCollector()
        logger.info("app.startup environment=%s", settings.environment)
        yield
        logger.info("app.shutdown")

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router)
    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(profile.router)
    application.include_router(skills.router)
    application.include_router(users.router)
    application.include_router(requests.router)
    application.include_router(ratings.router)
    application.include_router(global_messages.router)
    application.include_router(admin.router)

    # Shared MySQL schemas are managed outside the app; sqlite is created on demand.
    if build_sqlalchemy_db_url(settings).startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
