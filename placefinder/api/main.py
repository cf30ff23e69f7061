import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from placefinder.api.routes import categories, favorites, health, places
from placefinder.core.auth import TokenVerifier
from placefinder.core.config import Settings, get_settings
from placefinder.core.db import create_db_engine, create_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the API with its engine, session factory and token verifier injected."""
    settings = settings or get_settings()
    engine = engine or create_db_engine(settings)

    app = FastAPI(
        title="Placefinder API",
        description="Nearby places search with categories, keywords and favorites",
        version="1.0.0"
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_verifier = TokenVerifier(settings.secret_key)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, prefix="/api")
    app.include_router(places.router, prefix="/api", tags=["places"])
    app.include_router(favorites.router, prefix="/api", tags=["favorites"])
    app.include_router(categories.router, prefix="/api", tags=["categories"])

    @app.on_event("startup")
    async def log_startup():
        logger.info(
            "startup complete", extra={"env": settings.environment, "port": os.getenv("PORT", "8000")}
        )

    @app.get("/")
    async def root():
        return {"message": "Placefinder API", "version": "1.0.0"}

    return app
