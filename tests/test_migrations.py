from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from models import Base

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def migrated_connection():
    engine = create_engine("sqlite://", poolclass=StaticPool)
    with engine.begin() as connection:
        config = Config(str(ROOT / "alembic.ini"))
        config.set_main_option("script_location", str(ROOT / "alembic"))
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
        yield connection
    engine.dispose()


@pytest.mark.parametrize("table", ["programs", "donations"])
def test_migrated_indexes_match_models(migrated_connection, table):
    inspector = inspect(migrated_connection)
    migrated = {ix["name"]: bool(ix["unique"]) for ix in inspector.get_indexes(table)}
    declared = {ix.name: bool(ix.unique) for ix in Base.metadata.tables[table].indexes}

    assert migrated == declared
    assert inspector.get_unique_constraints(table) == []


def test_donation_code_is_unique_after_migration(migrated_connection):
    insert = text(
        "INSERT INTO donations (donation_code, amount, payment_source, status, is_anonymous) "
        "VALUES ('DPF-20261016-0001', 1000, 'manual', 'paid', 0)"
    )
    migrated_connection.execute(insert)

    with pytest.raises(IntegrityError):
        migrated_connection.execute(insert)
