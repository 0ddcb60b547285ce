# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlmodel import Session

from app.config import get_settings
from app.db import engine, init_db
from app.errors import AppError, app_error_handler
from app.logging_config import configure_logging
from app.routers import admin_routes, auth_routes, clients_routes, techs_routes, users_routes
from app.services.users import ensure_admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    init_db()
    with Session(engine) as session:
        admin = ensure_admin(session, get_settings())
        if admin is not None:
            logger.info("bootstrap admin ready id=%s", admin.id)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESC,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_exception_handler(AppError, app_error_handler)

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(clients_routes.router)
    app.include_router(techs_routes.router)
    app.include_router(admin_routes.router)

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
