"""Run Alembic migrations from application startup.

Migrations run for server databases unless ``DISABLE_AUTO_MIGRATIONS`` is set.
SQLite URLs fall back to ``Base.metadata.create_all`` unless ``AUTO_MIGRATE``
asks for Alembic explicitly.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}

REPO_ROOT = Path(__file__).resolve().parents[2]


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


def should_run_migrations(database_url: str, env: Mapping[str, str] | None = None) -> bool:
    """Decide whether startup should run Alembic, reading flags from ``env`` (default ``os.environ``)."""

    env = os.environ if env is None else env
    if env.get("PYTEST_CURRENT_TEST") is not None:
        return False
    if _is_truthy(env.get("DISABLE_AUTO_MIGRATIONS")):
        return False
    if _is_truthy(env.get("AUTO_MIGRATE")):
        return True
    return not database_url.strip().lower().startswith("sqlite")


def run_migrations_if_needed(*, database_url: str) -> bool:
    """Upgrade the schema to ``head``; returns True when Alembic was invoked."""

    if not should_run_migrations(database_url):
        logger.info("Auto-migrations disabled for this database")
        return False

    from alembic import command
    from alembic.config import Config

    alembic_ini = REPO_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        logger.warning("Auto-migrations skipped: missing alembic.ini at %s", alembic_ini)
        return False

    config = Config(str(alembic_ini))
    config.set_main_option("sqlalchemy.url", database_url)
    config.set_main_option("script_location", str(REPO_ROOT / "alembic"))

    logger.info("Running Alembic migrations (upgrade head)")
    command.upgrade(config, "head")
    logger.info("Alembic migrations completed")
    return True


__all__ = ["should_run_migrations", "run_migrations_if_needed"]
