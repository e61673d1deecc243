"""FastAPI application factory. No business logic; only wiring and middleware.

Serve with: uvicorn --factory accounts.main:create_app
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accounts.api import router
from accounts.core.config import Settings, get_settings
from accounts.core.database import create_db_engine, create_session_factory
from accounts.core.errors import register_exception_handlers
from accounts.core.logging import configure_logging
from accounts.core.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its collaborators constructed once and kept on
    app.state: settings, engine, session factory, password hasher, token service.
    """
    if settings is None:
        load_dotenv()
        settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    if settings.uses_default_jwt_secret:
        logger.warning("JWT_SECRET is the built-in development default; set it before deploying.")

    app = FastAPI(
        title="Accounts API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app

