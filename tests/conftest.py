import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("AUDIT_LOGS_DIR", tempfile.mkdtemp(prefix="kudumbashree-audit-"))

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base, get_db
from app.main import app
from app.models.member import KMember, MemberRole, MemberStatus

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

UNIT = "12"


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
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_member(db, member_id, first_name, role=MemberRole.K_MEMBER,
                status=MemberStatus.APPROVED, unit_number=UNIT, joined_at=None):
    member = KMember(
        id=member_id,
        first_name=first_name,
        last_name="Nair",
        phone=member_id,
        unit_number=unit_number,
        role=role,
        status=status,
        joined_at=joined_at,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def president(db):
    return make_member(db, "9000000001", "Lakshmi", role=MemberRole.PRESIDENT,
                       joined_at=datetime(2025, 3, 1))


@pytest.fixture
def member(db):
    return make_member(db, "9000000002", "Anitha", joined_at=datetime(2025, 3, 5))


@pytest.fixture
def other_member(db):
    return make_member(db, "9000000003", "Bindu")


@pytest.fixture
def pending_member(db):
    return make_member(db, "9000000004", "Chitra", status=MemberStatus.PENDING)


def auth_headers(member):
    token = create_access_token({"sub": member.id})
    return {"Authorization": f"Bearer {token}"}
