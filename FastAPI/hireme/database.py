import logging

from sqlalchemy import JSON, create_engine, inspect
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker, declarative_base

from hireme.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from hireme.models import (  # noqa: F401
        User,
        Job,
        JobTag,
        Application,
    )

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized")
    except Exception as e:
        logger.exception("Database initialization failed: %s", e)
        raise


def missing_tables() -> list[str]:
    """Model tables not yet present in the connected database."""
    from hireme.models import (  # noqa: F401
        User,
        Job,
        JobTag,
        Application,
    )

    existing_tables = set(inspect(engine).get_table_names())
    return sorted(set(Base.metadata.tables.keys()) - existing_tables)


def ensure_tables_exist() -> list[str]:
    """Create any missing tables without touching existing data. Returns the created names."""
    try:
        created_tables = missing_tables()
        # SQLAlchemy create_all only creates missing tables, never drops existing ones.
        Base.metadata.create_all(bind=engine)

        if created_tables:
            logger.info("Created missing DB tables: %s", ", ".join(created_tables))
        else:
            logger.info("All DB tables already exist; no schema changes applied.")
        return created_tables
    except Exception as e:
        logger.exception("Ensure tables failed: %s", e)
        raise
