"""
Tests for the MemberHub JSON API
"""
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from memberhub.common.database import repository
from memberhub.common.database.repository import init_db, get_session, MemberRepository
from memberhub.common.delivery.gmail_sender import DeliveryResult
from memberhub.common.membership import notifier as notifier_module
from memberhub.common.scheduler import health
from memberhub.config import settings
from memberhub.web import app as app_module
from memberhub.web.app import app
from memberhub.web.schemas import MAX_DURATION_DAYS


@pytest.fixture
def client(monkeypatch, tmp_path):
    monkeypatch.setattr(health, "HEALTH_FILE", tmp_path / ".scheduler_health")
    sender = MagicMock()
    sender.deliver.side_effect = lambda mail: DeliveryResult(mail, True)
    monkeypatch.setattr(notifier_module, "get_sender", lambda: sender)
    init_db("sqlite:///:memory:")
    yield TestClient(app)
    monkeypatch.setattr(repository, "_engine", None)
    monkeypatch.setattr(repository, "_SessionLocal", None)


def create_member(client, name="Alice", email="alice@example.com"):
    response = client.post("/members", json={"name": name, "email": email})
    assert response.status_code == 201
    return response.json()


class TestMembers:

    def test_create_and_read_member(self, client):
        created = create_member(client)

        response = client.get(f"/members/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Alice"
        assert body["is_active"] is False
        assert body["subscription_end"] is None

    def test_missing_member_is_404(self, client):
        assert client.get("/members/999").status_code == 404

    def test_active_status_of_missing_member_is_false(self, client):
        response = client.get("/members/999/active")

        assert response.status_code == 200
        assert response.json() == {"member_id": 999, "is_active": False}


class TestRenewal:

    def test_renew_with_recorded_payment(self, client):
        member = create_member(client)
        paid = client.post(f"/members/{member['id']}/payments", json={"amount": "100.00"})
        assert paid.status_code == 201

        response = client.post(
            f"/members/{member['id']}/renew",
            json={"amount": "100.00", "duration_days": 30},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_active"] is True
        assert datetime.fromisoformat(body["subscription_end"]) > datetime.utcnow()
        assert client.get(f"/members/{member['id']}/active").json()["is_active"] is True

    def test_renew_without_payment_is_402(self, client):
        member = create_member(client)

        response = client.post(
            f"/members/{member['id']}/renew",
            json={"amount": "100.00", "duration_days": 30},
        )

        assert response.status_code == 402
        assert client.get(f"/members/{member['id']}").json()["is_active"] is False

    def test_renew_unknown_member_is_404(self, client):
        response = client.post(
            "/members/999/renew", json={"amount": "10.00", "duration_days": 30}
        )

        assert response.status_code == 404

    def test_payment_cannot_be_reused(self, client):
        member = create_member(client)
        client.post(f"/members/{member['id']}/payments", json={"amount": "10.00"})
        body = {"amount": "10.00", "duration_days": 7}

        assert client.post(f"/members/{member['id']}/renew", json=body).status_code == 200
        assert client.post(f"/members/{member['id']}/renew", json=body).status_code == 402

    def test_invalid_duration_is_rejected(self, client):
        member = create_member(client)

        response = client.post(
            f"/members/{member['id']}/renew", json={"amount": "10.00", "duration_days": 0}
        )

        assert response.status_code == 422

    def test_overlong_duration_is_rejected_without_consuming_payment(self, client):
        member = create_member(client)
        client.post(f"/members/{member['id']}/payments", json={"amount": "10.00"})

        response = client.post(
            f"/members/{member['id']}/renew",
            json={"amount": "10.00", "duration_days": 10**7},
        )

        assert response.status_code == 422
        ok = client.post(
            f"/members/{member['id']}/renew",
            json={"amount": "10.00", "duration_days": MAX_DURATION_DAYS},
        )
        assert ok.status_code == 200


def login(client, monkeypatch, password="s3cret"):
    monkeypatch.setattr(settings, "admin_password", password)
    response = client.post("/admin/login", json={"password": password})
    assert response.status_code == 200


class TestAdmin:

    def test_login_with_wrong_password_is_401(self, client, monkeypatch):
        monkeypatch.setattr(settings, "admin_password", "s3cret")

        response = client.post("/admin/login", json={"password": "nope"})

        assert response.status_code == 401

    def test_login_without_configured_password_is_503(self, client, monkeypatch):
        monkeypatch.setattr(settings, "admin_password", "")

        assert client.post("/admin/login", json={"password": ""}).status_code == 503

    def test_deactivate_expired_requires_admin(self, client):
        assert client.post("/admin/deactivate-expired").status_code == 401

    def test_deactivate_expired_endpoint(self, client, monkeypatch):
        with get_session() as session:
            expired = MemberRepository(session).create("Old", "old@example.com")
            expired.is_active = True
            expired.subscription_end = datetime.utcnow() - timedelta(days=1)
            expired_id = expired.id
        login(client, monkeypatch)

        response = client.post("/admin/deactivate-expired")

        assert response.status_code == 200
        assert response.json() == {"deactivated": [expired_id]}
        assert client.get(f"/members/{expired_id}/active").json()["is_active"] is False
        assert health.read_health()["sweep"]["deactivated"] == 1

    def test_failed_sweep_surfaces_as_server_error(self, client, monkeypatch):
        with get_session() as session:
            expired = MemberRepository(session).create("Old", "old@example.com")
            expired.is_active = True
            expired.subscription_end = datetime.utcnow() - timedelta(days=1)
            expired_id = expired.id
        login(client, monkeypatch)

        def broken(db):
            raise RuntimeError("db gone")

        monkeypatch.setattr(app_module, "build_subscription_service", broken)
        raw_client = TestClient(app, raise_server_exceptions=False)
        raw_client.cookies.update(client.cookies)

        response = raw_client.post("/admin/deactivate-expired")

        assert response.status_code == 500
        assert client.get(f"/members/{expired_id}/active").json()["is_active"] is True
        assert not health.HEALTH_FILE.exists()

    def test_logout_ends_session(self, client, monkeypatch):
        login(client, monkeypatch)

        client.post("/admin/logout")
        client.cookies.clear()

        assert client.post("/admin/deactivate-expired").status_code == 401


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "last_sweep": None}
