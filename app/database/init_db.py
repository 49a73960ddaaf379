import logging
from sqlalchemy import text, quoted_name
from .db_connection import engine, Base, DELIVERY_SCHEMA, is_sqlite

logger = logging.getLogger(__name__)

SCHEMAS = [DELIVERY_SCHEMA]


def create_schemas():
    """Creates the PostgreSQL schemas used by the models (no-op on SQLite)."""
    if is_sqlite():
        return
    try:
        with engine.begin() as conn:
            for schema in SCHEMAS:
                logger.info(f"🛠️ Creating/checking schema: {schema}")
                conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS {quoted_name(schema, quote=True)}'))
        logger.info("✅ Schemas checked/created.")
    except Exception as e:
        logger.error(f"❌ Error creating schemas: {e}")
        raise


def create_tables():
    """Creates missing tables. Existing tables are never dropped or altered."""
    # registers every model on Base.metadata
    from app.api.delivery import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Tables checked/created.")
    except Exception as e:
        logger.error(f"❌ Error creating tables: {e}")
        raise


def initialize_database():
    logger.info("🚀 Initializing database...")
    create_schemas()
    create_tables()
    logger.info("✅ Database ready.")
