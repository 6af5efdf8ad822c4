from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import jwt
import pytest

from fakes import InMemoryFacility, InMemoryShifts, InMemoryWorkers
from shift_log import create_app
from shift_log.access.auth import JWTAuthVerifier
from shift_log.container import assemble
from shift_log.facility.model import FacilityLocation

JWT_SECRET = "test-jwt-secret"

FACILITY = FacilityLocation(
    name="Main Healthcare Center",
    latitude=13.067014,
    longitude=77.466541,
    radius_meters=2000,
)


def make_settings(**overrides):
    values = dict(
        SECRET_KEY="test-secret",
        DEBUG=False,
        TESTING=True,
        LOG_LEVEL="WARNING",
        TIMEZONE="UTC",
        FACILITY_NAME=None,
        FACILITY_LATITUDE=None,
        FACILITY_LONGITUDE=None,
        FACILITY_RADIUS=None,
        REQUIRE_LOCATION=False,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def workers_repo():
    return InMemoryWorkers()


@pytest.fixture
def shifts_repo(workers_repo):
    repo = InMemoryShifts()
    workers_repo.shifts = repo
    return repo


@pytest.fixture
def facility_repo():
    return InMemoryFacility(FACILITY)


@pytest.fixture
def container(workers_repo, shifts_repo, facility_repo):
    return assemble(
        conn=None,
        workers_repo=workers_repo,
        shifts_repo=shifts_repo,
        facility_repo=facility_repo,
        auth_verifier=JWTAuthVerifier(JWT_SECRET),
        settings=make_settings(),
    )


@pytest.fixture
def client(container):
    app = create_app(settings=make_settings(), container=container)
    return app.test_client()


@pytest.fixture
def token():
    def _make(sub: str, role: str = "CAREWORKER", **claims) -> dict:
        payload = {"sub": sub, "role": role, "email": f"{sub}@example.com", "name": sub.title()}
        payload.update(claims)
        encoded = jwt.encode(payload, JWT_SECRET, algorithm="HS256")
        return {"Authorization": f"Bearer {encoded}"}

    return _make
