"""
Serve one of the tagwallet apps.

Usage:
  python -m tagwallet auth [--host 0.0.0.0] [--port 3000]
  python -m tagwallet rewards [--port 3001]
"""
from __future__ import annotations

import argparse

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from tagwallet.core.config import DEFAULT_JWT_SECRET, get_settings
from tagwallet.core.logging import configure_logging, get_logger
from tagwallet.db.create_tables import check_connection, create_all

logger = get_logger("tagwallet")


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(prog="tagwallet", description="Run the auth or rewards API")
    ap.add_argument("service", choices=["auth", "rewards"])
    ap.add_argument("--host", default="0.0.0.0")
    ap.add_argument("--port", type=int, help="default: PORT (auth) or REWARDS_PORT (rewards)")
    args = ap.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.app_env)

    if settings.app_env == "prod" and settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise SystemExit("JWT_SECRET must be set in prod")

    try:
        check_connection()
        create_all()
    except SQLAlchemyError as exc:
        logger.error("Database connection error: %s", exc)
        raise SystemExit(1) from exc
    logger.info("Connected to database")

    if args.service == "auth":
        from tagwallet.app import create_app

        app = create_app(settings)
        port = args.port or settings.port
    else:
        from tagwallet.rewards_app import create_rewards_app

        app = create_rewards_app(settings)
        port = args.port or settings.rewards_port

    logger.info("Starting %s service on port %s", args.service, port)
    uvicorn.run(app, host=args.host, port=port, log_config=None)


if __name__ == "__main__":
    main()
