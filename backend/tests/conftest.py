# backend/tests/conftest.py
"""
Pytest configuration.

Settings are read at import time, so the environment is prepared before
any application import. Every test gets a fresh in-memory SQLite schema.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import RedisError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from checkup_capacity.database import get_db
from checkup_capacity.dependencies import get_redis
from checkup_capacity.main import app
from checkup_capacity.models import (
    Base,
    Booking,
    CapacityDefault,
    CapacityOverride,
    Hospital,
    SlotTemplate,
)
from checkup_capacity.services.capacity import CapacityConfig

# 2026-10-21 is a Wednesday (Sunday-based dow 3)
WEDNESDAY = date(2026, 10, 21)
THURSDAY = date(2026, 10, 22)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRedis:
    """In-memory stand-in for the few Redis calls the template cache makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttl: dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.ttl[key] = ex
        return True

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttl.pop(key, None)
                deleted += 1
        return deleted

    def ping(self):
        return True


class BrokenRedis:
    def get(self, key):
        raise RedisError("connection refused")

    def set(self, key, value, ex=None):
        raise RedisError("connection refused")

    def delete(self, *keys):
        raise RedisError("connection refused")


@pytest.fixture
def config():
    return CapacityConfig()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def hospital(db):
    obj = Hospital(slug="seoul", name="Seoul Checkup Center")
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def other_hospital(db):
    obj = Hospital(slug="busan", name="Busan Checkup Center")
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def tenant_headers(hospital):
    return {"X-Tenant": hospital.slug}


@pytest.fixture
def make_template(db):
    def _make(hospital, dow, start, end, capacity):
        obj = SlotTemplate(hospital_id=hospital.id, dow=dow, start=start, end=end, capacity=capacity)
        db.add(obj)
        db.commit()
        return obj
    return _make


@pytest.fixture
def make_bookings(db):
    def _make(hospital, day, count, status="CONFIRMED"):
        for _ in range(count):
            db.add(Booking(hospital_id=hospital.id, date=day, status=status))
        db.commit()
    return _make


@pytest.fixture
def make_override(db):
    def _make(hospital, day, resource_key, is_closed=True):
        obj = CapacityOverride(
            hospital_id=hospital.id,
            date=day,
            resource_key=resource_key,
            is_closed=is_closed,
        )
        db.add(obj)
        db.commit()
        return obj
    return _make


@pytest.fixture
def set_default(db):
    def _set(hospital, basic):
        db.add(CapacityDefault(hospital_id=hospital.id, basic_cap=basic, nhis_cap=0, special_cap=0))
        db.commit()
    return _set


@pytest.fixture
def broken_redis():
    return BrokenRedis()
