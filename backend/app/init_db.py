"""
Create all tables on the configured database.

Usage:
    python -m app.init_db
"""

import logging

from app.database import Base, engine
import app.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    init_db()
