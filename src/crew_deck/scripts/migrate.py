# src/crew_deck/scripts/migrate.py
"""Apply Alembic migrations up to head against the configured database."""
from __future__ import annotations

import logging
import os

from alembic import command
from alembic.config import Config

from crew_deck.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def run_upgrade_head() -> None:
    # Point Alembic at the migrations folder
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    logger.info("Upgrading %s to head", settings.database_url_sync)
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_upgrade_head()
