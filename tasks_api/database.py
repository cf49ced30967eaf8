from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from tasks_api.config import Settings, get_settings
from tasks_api.logger import logger

settings = get_settings()


class MigrationVersionError(RuntimeError):
    """The database schema is older than this service requires."""


def _engine_options(settings: Settings) -> dict:
    """Pool and connection options for the configured backend.

    SQLite (used by the test suite) manages its own pool, so sizing only
    applies to server databases. On PostgreSQL every statement runs under a
    server-side timeout so a stalled query is aborted instead of holding a
    pooled connection forever.
    """
    if settings.database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }
    if settings.database_url.startswith("postgres") and settings.db_statement_timeout_ms > 0:
        options["connect_args"] = {
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}"
        }
    return options


# Create engine with connection pooling
engine = create_engine(
    settings.database_url,
    echo=False,
    **_engine_options(settings),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Database session dependency"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine = engine):
    """Initialize database tables"""
    # Register the table on Base.metadata
    from tasks_api import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise


def check_migration_version(bind: Engine, table_name: str, min_version: int) -> None:
    """Verify that an applied migration at or above ``min_version`` exists.

    ``table_name`` is the bookkeeping table maintained by the migration tool
    (``version_id`` / ``is_applied`` columns). It comes from configuration,
    never from a request.
    """
    query = text(
        f"SELECT version_id FROM {table_name} "
        "WHERE is_applied = true AND version_id >= :min_version"
    )
    try:
        with bind.connect() as conn:
            row = conn.execute(query, {"min_version": min_version}).first()
    except SQLAlchemyError as e:
        logger.error(f"Error while checking migration version: {str(e)}")
        raise

    if row is None:
        raise MigrationVersionError(
            f"version incompatible: expected {table_name} version to be >= {min_version}"
        )
    logger.info("Database migration version check successful")
