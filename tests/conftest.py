# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

os.environ.setdefault("SECRET_KEY", "classflow-test-secret")

from classflow.core.dto import Principal
from classflow.core.metrics import MetricsCollector
from classflow.core.security import create_access_token, hash_password
from classflow.db.session import Base, build_engine, build_session_factory
from classflow.main import create_app
from classflow.models import Building, Faculty, Program, Role, SubjectType, User
from classflow.services.group_engine import GroupEngine

DEFAULT_PASSWORD = "password123"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine(tmp_path_factory: pytest.TempPathFactory) -> Generator[Engine, None, None]:
    # A file database so that worker threads get their own connections.
    db_path = tmp_path_factory.mktemp("db") / "classflow-test.db"
    engine = build_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = build_session_factory(engine)
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def metrics() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture()
def group_engine(
    session_factory: sessionmaker[Session], metrics: MetricsCollector
) -> GroupEngine:
    return GroupEngine(session_factory, metrics=metrics)


@pytest.fixture()
def catalog(session_factory: sessionmaker[Session]) -> SimpleNamespace:
    """Two faculties; program 7 belongs to faculty 2."""
    with session_factory() as db:
        db.add_all(
            [
                Faculty(id=1, name="Engineering"),
                Faculty(id=2, name="Natural Sciences"),
            ]
        )
        db.flush()
        db.add_all(
            [
                Program(id=1, name="Software Engineering", faculty_id=1),
                Program(id=3, name="Robotics", faculty_id=1),
                Program(id=7, name="Physics", faculty_id=2),
                Building(
                    id=1,
                    name="Main building",
                    latitude=55.751,
                    longitude=37.617,
                    address="1 University Square",
                ),
                Building(
                    id=2,
                    name="Lab block",
                    latitude=55.753,
                    longitude=37.621,
                    address="5 Science Lane",
                ),
                SubjectType(id=1, name="Lecture"),
                SubjectType(id=2, name="Seminar"),
            ]
        )
        db.commit()
    return SimpleNamespace(
        engineering=1,
        sciences=2,
        software=1,
        robotics=3,
        physics=7,
        main_building=1,
        lab_block=2,
        lecture=1,
        seminar=2,
    )


@pytest.fixture()
def make_user(session_factory: sessionmaker[Session]) -> Callable[..., User]:
    def _make_user(role: Role = Role.STUDENT, email: str | None = None) -> User:
        with session_factory() as db:
            user = User(
                email=email or f"user{next(_EMAIL_COUNTER)}@example.edu",
                password_hash=hash_password(DEFAULT_PASSWORD),
                full_name="Test User",
                role=role,
            )
            db.add(user)
            db.commit()
            return user

    return _make_user


@pytest.fixture()
def student(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture()
def other_student(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user(role=Role.ADMIN)


@pytest.fixture()
def principal(session_factory: sessionmaker[Session]) -> Callable[[User], Principal]:
    """Build a principal carrying the user's current role from the database."""

    def _principal(user: User) -> Principal:
        with session_factory() as db:
            fresh = db.get(User, user.id)
            assert fresh is not None
            return Principal(user_id=fresh.id, role=fresh.role)

    return _principal


@pytest.fixture()
def role_of(session_factory: sessionmaker[Session]) -> Callable[[User], Role]:
    def _role_of(user: User) -> Role:
        with session_factory() as db:
            fresh = db.get(User, user.id)
            assert fresh is not None
            return fresh.role

    return _role_of


@pytest.fixture()
def app(session_factory: sessionmaker[Session], metrics: MetricsCollector) -> FastAPI:
    return create_app(session_factory=session_factory, metrics=metrics)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
