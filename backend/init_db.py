from database import engine, Base
from sqlalchemy import inspect
from sqlalchemy.engine import Engine
import logging

import models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def init_database(bind: Engine | None = None):
    """
    Create any missing tables.

    Existing tables are left untouched; create_all only issues CREATE TABLE
    for tables that do not exist yet.
    """
    bind = bind if bind is not None else engine
    existing = set(inspect(bind).get_table_names())

    Base.metadata.create_all(bind=bind)

    created = [name for name in Base.metadata.tables if name not in existing]
    if created:
        logger.info(f"✅ Created tables: {', '.join(sorted(created))}")
    else:
        logger.info("Database schema up to date")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
