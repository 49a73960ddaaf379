# app/database/db_connection.py

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from ..config.settings import DATABASE_URL, DB_CONFIG, DB_SSL_MODE, DB_TIMEZONE

# Single Base for every model
Base = declarative_base()

# PostgreSQL schema holding the delivery tables
DELIVERY_SCHEMA = "delivery"

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_connection_string() -> str:
    if DATABASE_URL:
        return DATABASE_URL

    missing = [k for k in ('database', 'user', 'password', 'host', 'port') if not DB_CONFIG.get(k)]
    if missing:
        raise RuntimeError(f"Invalid database configuration, missing variables: {', '.join(missing)}")

    ssl_query = f"?sslmode={DB_SSL_MODE}" if DB_SSL_MODE else ""
    return (
        f"postgresql://{DB_CONFIG['user']}:{DB_CONFIG['password']}"
        f"@{DB_CONFIG['host']}:{DB_CONFIG['port']}/{DB_CONFIG['database']}{ssl_query}"
    )


def build_engine(connection_string: str):
    if connection_string.startswith("sqlite"):
        # SQLite has no schemas: map "delivery.<table>" to plain "<table>"
        return create_engine(
            connection_string,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            execution_options={"schema_translate_map": {DELIVERY_SCHEMA: None}},
        )

    return create_engine(
        connection_string,
        pool_pre_ping=True,
        connect_args={
            "options": f"-c timezone={DB_TIMEZONE}"
        }
    )


connection_string = build_connection_string()
engine = build_engine(connection_string)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def is_sqlite() -> bool:
    return engine.dialect.name == "sqlite"


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
