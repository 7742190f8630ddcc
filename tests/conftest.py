import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MIDTRANS_SERVER_KEY", "test-server-key")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from dependencies import require_admin
from main import app
from models import Base, Donation, DonationStatus, PaymentSource, Program, ProgramStatus


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _override_session(session_factory):
    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return override_get_session


@pytest.fixture
def client(session_factory):
    """TestClient logged in as an admin."""
    app.dependency_overrides[get_session] = _override_session(session_factory)
    app.dependency_overrides[require_admin] = lambda: {"id": 1, "role": "admin"}
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(session_factory):
    """TestClient with the real token check in place."""
    app.dependency_overrides[get_session] = _override_session(session_factory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_program(db):
    counter = {"n": 0}

    def factory(collected="0", status=ProgramStatus.ACTIVE, **kwargs):
        counter["n"] += 1
        program = Program(
            title=kwargs.pop("title", f"Program {counter['n']}"),
            slug=kwargs.pop("slug", f"program-{counter['n']}"),
            category=kwargs.pop("category", "Pendidikan"),
            target_amount=kwargs.pop("target_amount", Decimal("1000000")),
            collected_amount=Decimal(collected),
            status=status,
            **kwargs,
        )
        db.add(program)
        db.commit()
        return program

    return factory


@pytest.fixture
def make_donation(db):
    counter = {"n": 0}

    def factory(amount, program=None, status=DonationStatus.PAID, **kwargs):
        counter["n"] += 1
        donation = Donation(
            program_id=program.id if program is not None else None,
            donation_code=kwargs.pop("donation_code", f"DPF-19990101-{counter['n']:04d}"),
            donor_name=kwargs.pop("donor_name", "Donor"),
            amount=Decimal(amount),
            is_anonymous=kwargs.pop("is_anonymous", False),
            payment_source=kwargs.pop("payment_source", PaymentSource.MANUAL),
            status=status,
            **kwargs,
        )
        db.add(donation)
        db.commit()
        return donation

    return factory


@pytest.fixture
def reload(db):
    """Re-read an object after the API changed it in another session."""

    def _reload(obj):
        db.expire_all()
        return db.get(type(obj), obj.id)

    return _reload
