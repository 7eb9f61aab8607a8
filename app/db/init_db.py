import logging

from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)


def init_db():
    # Development helper, deployments run `alembic upgrade head`
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from app.core.logging import setup_logging

    setup_logging()
    init_db()
    logger.info("Database initialized")
