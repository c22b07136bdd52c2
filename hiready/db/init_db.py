"""
Create all tables directly (local development without Alembic).
"""
import logging
from hiready.db.session import engine
from hiready.db.base import Base
import hiready.db.models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db():
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


if __name__ == "__main__":
    init_db()
