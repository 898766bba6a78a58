import logging
from typing import Optional

from sqlalchemy import text
from tenacity import retry, stop_after_attempt, wait_fixed

from database.database import init_database, get_db_manager, is_initialized

logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def init_db(url: Optional[str] = None):
    """Create the engine tables, waiting for the database to come up."""
    logger.info("Initializing database...")
    manager = init_database(url) if url or not is_initialized() else get_db_manager()
    try:
        with manager.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

        manager.create_all()
        logger.info("Tables created or verified.")

    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
