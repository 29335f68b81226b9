"""
Rewards service: reward profiles and the daily check-in.

Serve with `python -m tagwallet rewards` or
`uvicorn tagwallet.rewards_app:create_rewards_app --factory`.
"""

from fastapi import FastAPI

from tagwallet.app import add_cors
from tagwallet.core.config import Settings, get_settings
from tagwallet.core.errors import install_error_handlers
from tagwallet.repositories.sql_repository import SQLRepository
from tagwallet.routers import rewards as rewards_router
from tagwallet.services.reward_service import RewardService


def create_rewards_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Tagwallet Rewards API")
    app.state.settings = settings
    app.state.reward_service = RewardService(settings=settings, repository=SQLRepository())

    add_cors(app, settings)
    install_error_handlers(app)
    app.include_router(rewards_router.router)
    return app
