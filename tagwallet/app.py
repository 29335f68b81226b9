"""
Auth service: accounts, bearer tokens and NFC tag bindings.

Serve with `python -m tagwallet auth` or
`uvicorn tagwallet.app:create_app --factory`.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from tagwallet.core.config import Settings, get_settings
from tagwallet.core.errors import install_error_handlers
from tagwallet.core.uploads import AvatarStorage
from tagwallet.repositories.sql_repository import SQLRepository
from tagwallet.routers import auth as auth_router
from tagwallet.routers import cards as cards_router
from tagwallet.services.auth_service import AuthService
from tagwallet.services.card_service import CardService


def add_cors(app: FastAPI, settings: Settings) -> None:
    origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    settings = settings or get_settings()
    app = FastAPI(title="Tagwallet Auth API")

    os.makedirs(settings.uploads_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")

    repository = SQLRepository()
    app.state.settings = settings
    app.state.auth_service = AuthService(settings=settings, repository=repository)
    app.state.card_service = CardService(
        settings=settings,
        repository=repository,
        storage=AvatarStorage(settings.uploads_dir),
    )

    add_cors(app, settings)
    install_error_handlers(app)
    app.include_router(auth_router.router)
    app.include_router(cards_router.router)
    return app
