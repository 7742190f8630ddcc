from jose import jwt
from sqlalchemy import create_engine

import database
import dependencies
import main


def _token(role):
    return jwt.encode({"sub": "1", "role": role}, dependencies.SECRET_KEY, algorithm=dependencies.ALGORITHM)


def test_admin_routes_require_token(anon_client):
    response = anon_client.get("/api/admin/donations")

    assert response.status_code == 401
    assert response.json() == {"message": "Missing token"}


def test_invalid_token(anon_client):
    response = anon_client.get("/api/admin/programs", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json() == {"message": "Invalid token"}


def test_non_admin_role_is_forbidden(anon_client):
    response = anon_client.get(
        "/api/admin/donations",
        headers={"Authorization": f"Bearer {_token('editor')}"},
    )

    assert response.status_code == 403


def test_admin_and_superadmin_are_allowed(anon_client):
    for role in ("admin", "superadmin"):
        response = anon_client.get(
            "/api/admin/programs",
            headers={"Authorization": f"Bearer {_token(role)}"},
        )
        assert response.status_code == 200


def test_public_routes_need_no_token(anon_client):
    assert anon_client.get("/api/programs").status_code == 200
    assert anon_client.get("/api/donations/summary").status_code == 200


def test_unknown_route(anon_client):
    response = anon_client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"message": "Route not found"}


def test_health(anon_client):
    response = anon_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_health_reports_unreachable_database(anon_client, monkeypatch):
    monkeypatch.setattr(main, "check_connection", lambda: False)

    response = anon_client.get("/api/health")

    assert response.status_code == 503
    assert response.json()["database"] == "unreachable"


def test_check_connection(monkeypatch, tmp_path):
    assert database.check_connection() is True

    missing = tmp_path / "missing" / "dpf.db"
    broken = create_engine(f"sqlite:///{missing}")
    monkeypatch.setattr(database, "engine", broken)
    assert database.check_connection() is False
