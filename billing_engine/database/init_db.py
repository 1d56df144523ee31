# billing_engine/database/init_db.py

import os

from sqlalchemy.engine import make_url

from billing_engine.database.db_utils import configure_engine, get_engine
from billing_engine.database.models import Base
from billing_engine.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(db_url=None):
    """
    Creates all tables defined in models.py inside the database.
    """
    logger.info("🔄 Connecting to database...")
    engine = configure_engine(db_url) if db_url else get_engine()

    url = make_url(engine.url)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        folder = os.path.dirname(url.database)
        if folder:
            os.makedirs(folder, exist_ok=True)

    Base.metadata.create_all(engine)
    logger.info("✅ Tables created successfully!")
    return engine


if __name__ == "__main__":
    init_db()


# python -m billing_engine.database.init_db
