import pytest
from sqlalchemy import text

from tasks_api.database import MigrationVersionError, check_migration_version, init_db


@pytest.fixture
def bind(db_session):
    return db_session.get_bind()


@pytest.fixture
def migration_table(bind):
    with bind.begin() as conn:
        conn.execute(text(
            "CREATE TABLE goose_db_version (version_id INTEGER, is_applied BOOLEAN)"
        ))
        conn.execute(text("INSERT INTO goose_db_version VALUES (1, 1), (2, 1), (3, 0)"))
    yield "goose_db_version"
    with bind.begin() as conn:
        conn.execute(text("DROP TABLE goose_db_version"))


def test_migration_version_satisfied(bind, migration_table):
    check_migration_version(bind, migration_table, 2)


def test_migration_version_too_old(bind, migration_table):
    # version 3 exists but was never applied
    with pytest.raises(MigrationVersionError):
        check_migration_version(bind, migration_table, 3)


def test_init_db_is_repeatable(bind):
    init_db(bind)
    init_db(bind)
    with bind.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM tasks")).scalar_one() == 0
