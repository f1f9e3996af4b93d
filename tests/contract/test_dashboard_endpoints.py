"""Contract tests for dashboard endpoints."""

import random
import threading
import time
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from servicepay.main import create_app
from servicepay.models import Base, Bill, BillStatus, ServiceProvider
from servicepay.services import get_db
from servicepay.services.account_repository import AccountRepository
from servicepay.services.period_service import ActivePeriodResolver
from servicepay.services.provisioning_service import AccountProvisioner, DefaultBillSchedule

AUTH = {"Authorization": "Bearer session-1"}


def _make_app(fixed_clock):
    provisioner = AccountProvisioner(
        schedule_policy=DefaultBillSchedule(rng=random.Random(3)), clock=fixed_clock
    )
    return create_app(provisioner=provisioner, resolver=ActivePeriodResolver(clock=fixed_clock))


@pytest.fixture
def app(fixed_clock):
    """Application without a persistent store."""
    return _make_app(fixed_clock)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db_app(fixed_clock, db_session):
    """Application backed by the in-memory test database."""
    app = _make_app(fixed_clock)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def db_client(db_app):
    return TestClient(db_app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestSessionGate:
    """Endpoints require a session token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/dashboard/services"),
            ("post", "/api/dashboard/services"),
            ("post", "/api/dashboard/logout"),
        ],
    )
    def test_missing_session_returns_401(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "not_authorized"

    def test_malformed_header_returns_401(self, client):
        response = client.get("/api/dashboard/services", headers={"Authorization": "tma x"})

        assert response.status_code == 401


class TestListServices:
    """Tests for GET /api/dashboard/services."""

    def test_new_session_has_no_services(self, client):
        response = client.get("/api/dashboard/services", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"services": [], "total_count": 0}

    def test_list_after_add_preserves_order(self, client):
        for number in ("111", "222", "333"):
            client.post(
                "/api/dashboard/services",
                json={"provider": "AYSAM", "accountNumber": number},
                headers=AUTH,
            )

        first = client.get("/api/dashboard/services", headers=AUTH).json()
        second = client.get("/api/dashboard/services", headers=AUTH).json()

        assert [s["account_number"] for s in first["services"]] == ["111", "222", "333"]
        assert first == second
        assert first["total_count"] == 3

    def test_sessions_do_not_share_directories(self, client):
        client.post(
            "/api/dashboard/services",
            json={"provider": "EDEMSA", "accountNumber": "5555555"},
            headers=AUTH,
        )

        other = client.get(
            "/api/dashboard/services", headers={"Authorization": "Bearer session-2"}
        ).json()

        assert other["total_count"] == 0

    def test_active_period_spanning_years(self, app, client):
        """Directory entries resolve to the earliest year still owing money."""
        account = AccountProvisioner(clock=lambda: date(2026, 1, 1)).provision(
            ServiceProvider.ECOGAS_CUYANA, "9876543", "Home Gas"
        )
        account.bills = [Bill(month=m, year=2026, status=BillStatus.PAID, amount=Decimal(200))
                         for m in range(1, 13)]
        account.bills += [
            Bill(month=1, year=2027, status=BillStatus.PENDING, amount=Decimal(220)),
            Bill(month=2, year=2027, status=BillStatus.PENDING, amount=Decimal(225)),
        ] + [Bill(month=m, year=2027, status=BillStatus.FUTURE) for m in range(3, 13)]
        app.state.directory_store.get("session-1").add(account)

        service = client.get("/api/dashboard/services", headers=AUTH).json()["services"][0]

        assert service["active_year"] == 2027
        assert service["total_debt"] == "445.00"
        assert len(service["bills"]) == 12
        assert service["provider_name"] == "ECOGAS CUYANA"
        assert service["icon"] == "flame"


class TestAddService:
    """Tests for POST /api/dashboard/services."""

    def test_add_service_returns_summary(self, client):
        response = client.post(
            "/api/dashboard/services",
            json={"provider": "AYSAM", "accountNumber": "1234567", "alias": "Home Water"},
            headers=AUTH,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["provider"] == "AYSAM"
        assert data["category"] == "water"
        assert data["alias"] == "Home Water"
        assert data["active_year"] == 2026
        assert [b["status"] for b in data["bills"]] == ["PAID"] * 2 + ["PENDING"] * 2 + [
            "FUTURE"
        ] * 8
        pending = [Decimal(b["amount"]) for b in data["bills"] if b["status"] == "PENDING"]
        assert Decimal(data["total_debt"]) == sum(pending)
        assert data["bills"][2]["label"].startswith("Mar 2026: PENDING - $")

    @pytest.mark.parametrize(
        "payload",
        [
            {"accountNumber": "1234567"},
            {"provider": "ACME", "accountNumber": "1234567"},
            {"provider": "AYSAM", "accountNumber": ""},
            {"provider": "AYSAM", "accountNumber": "12 34"},
        ],
    )
    def test_invalid_payload_returns_422(self, client, payload):
        response = client.post("/api/dashboard/services", json=payload, headers=AUTH)

        assert response.status_code == 422

    def test_invalid_payload_does_not_provision(self, app, client):
        with patch.object(app.state.provisioner, "provision") as provision:
            client.post(
                "/api/dashboard/services",
                json={"provider": "AYSAM", "accountNumber": "bad number"},
                headers=AUTH,
            )

        provision.assert_not_called()
        assert len(app.state.directory_store.get("session-1")) == 0


class TestLogout:
    """Tests for POST /api/dashboard/logout."""

    def test_logout_clears_directory(self, app, client):
        client.post(
            "/api/dashboard/services",
            json={"provider": "AYSAM", "accountNumber": "1"},
            headers=AUTH,
        )

        response = client.post("/api/dashboard/logout", headers=AUTH)

        assert response.status_code == 204
        assert "session-1" not in app.state.directory_store
        listed = client.get("/api/dashboard/services", headers=AUTH).json()
        assert listed["total_count"] == 0


class TestWithStore:
    """Endpoints backed by a persistent store."""

    def test_added_service_is_persisted(self, db_client, db_session):
        response = db_client.post(
            "/api/dashboard/services",
            json={"provider": "EDEMSA", "accountNumber": "5555555"},
            headers=AUTH,
        )

        assert response.status_code == 201
        stored = AccountRepository(db_session).list_for_owner("session-1")
        assert [a.id for a in stored] == [response.json()["account_id"]]

    def test_directory_hydrated_after_logout(self, db_client):
        db_client.post(
            "/api/dashboard/services",
            json={"provider": "AYSAM", "accountNumber": "1234567"},
            headers=AUTH,
        )
        db_client.post("/api/dashboard/logout", headers=AUTH)

        listed = db_client.get("/api/dashboard/services", headers=AUTH).json()

        assert [s["account_number"] for s in listed["services"]] == ["1234567"]

    def test_store_failure_returns_503(self, db_client, db_session):
        error = OperationalError("COMMIT", {}, Exception("store down"))
        with patch.object(db_session, "commit", side_effect=error):
            response = db_client.post(
                "/api/dashboard/services",
                json={"provider": "AYSAM", "accountNumber": "1234567"},
                headers=AUTH,
            )

        assert response.status_code == 503
        assert response.json()["detail"]["error"]["code"] == "store_unavailable"
        listed = db_client.get("/api/dashboard/services", headers=AUTH).json()
        assert listed["total_count"] == 0

    def test_load_failure_returns_503(self, db_client):
        error = OperationalError("SELECT", {}, Exception("store down"))
        with patch.object(AccountRepository, "list_for_owner", side_effect=error):
            response = db_client.get("/api/dashboard/services", headers=AUTH)

        assert response.status_code == 503


class TestConcurrentFirstRequests:
    """Parallel first requests of one session hydrate its directory once."""

    def test_concurrent_gets_load_stored_accounts_once(self, db_app, db_client, db_session):
        db_client.post(
            "/api/dashboard/services",
            json={"provider": "AYSAM", "accountNumber": "1234567"},
            headers=AUTH,
        )
        db_client.post("/api/dashboard/logout", headers=AUTH)
        stored = AccountRepository(db_session).list_for_owner("session-1")

        def slow_list_for_owner(owner_id):
            time.sleep(0.1)
            return list(stored)

        barrier = threading.Barrier(2)
        statuses = []

        def first_request():
            client = TestClient(db_app)
            barrier.wait()
            statuses.append(client.get("/api/dashboard/services", headers=AUTH).status_code)

        with patch.object(AccountRepository, "list_for_owner", side_effect=slow_list_for_owner):
            threads = [threading.Thread(target=first_request) for _ in range(2)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert statuses == [200, 200]
        listed = db_client.get("/api/dashboard/services", headers=AUTH).json()
        assert listed["total_count"] == 1


class TestPerRequestSessions:
    """Each request gets its own database session, closed afterwards."""

    @pytest.fixture
    def session_client(self, fixed_clock):
        engine = create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        app = _make_app(fixed_clock)

        def per_request_db():
            db = SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = per_request_db
        yield TestClient(app)
        app.dependency_overrides.clear()
        Base.metadata.drop_all(engine)
        engine.dispose()

    def test_detached_accounts_survive_between_requests(self, session_client):
        first = session_client.post(
            "/api/dashboard/services",
            json={"provider": "AYSAM", "accountNumber": "111", "alias": "Home Water"},
            headers=AUTH,
        )
        assert first.status_code == 201

        listed = session_client.get("/api/dashboard/services", headers=AUTH).json()
        assert [s["account_number"] for s in listed["services"]] == ["111"]
        assert len(listed["services"][0]["bills"]) == 12

        session_client.post("/api/dashboard/logout", headers=AUTH)
        rehydrated = session_client.get("/api/dashboard/services", headers=AUTH).json()
        assert rehydrated["services"][0]["account_id"] == first.json()["account_id"]
        assert rehydrated["services"][0]["total_debt"] == first.json()["total_debt"]

        second = session_client.post(
            "/api/dashboard/services",
            json={"provider": "EDEMSA", "accountNumber": "222"},
            headers=AUTH,
        )
        assert second.status_code == 201

        final = session_client.get("/api/dashboard/services", headers=AUTH).json()
        assert [s["account_number"] for s in final["services"]] == ["111", "222"]
        assert all(len(s["bills"]) == 12 for s in final["services"])
