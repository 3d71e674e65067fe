"""
College Portal - test configuration and fixtures
"""
import os

# Set testing environment before the app reads its settings
os.environ["APP_ENV"] = "test"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CLIENT_ORIGIN"] = "http://portal.test"

from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from college_portal.core.database import get_database
from college_portal.core.database_setup import ensure_indexes
from college_portal.crud import students as students_crud
from college_portal.crud import users as users_crud
from college_portal.main import app
from college_portal.services.auth import hash_password

ADMIN_PASSWORD = "adminpass123"
FACULTY_PASSWORD = "facultypass123"
STUDENT_PASSWORD = "studentpass123"


@pytest.fixture
async def db():
    """Fresh in-memory database per test, with the real indexes."""
    database = AsyncMongoMockClient()["college_portal_test"]
    await ensure_indexes(database)
    yield database


@pytest.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the database dependency overridden."""

    async def override_get_database():
        return db

    app.dependency_overrides[get_database] = override_get_database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory that inserts an account (and a profile for students)."""

    async def _make_user(
        email: str,
        password: str,
        role: str,
        sub_role: Optional[str] = None,
        name: Optional[str] = None,
        status: str = "active",
        first_name: str = "Stu",
        last_name: str = "Dent",
        department: Optional[str] = None,
        year: Optional[int] = None,
    ):
        user = await users_crud.create_user(
            db,
            email=email,
            password_hash=hash_password(password),
            role=role,
            sub_role=sub_role,
            name=name,
            department=department if role == "academic" else None,
            status=status,
        )
        profile = None
        if role == "student":
            profile = await students_crud.create_profile(
                db,
                user_id=user["_id"],
                first_name=first_name,
                last_name=last_name,
                department=department,
                year=year,
            )
        return user, profile

    return _make_user


@pytest.fixture
def login_as(client):
    """Log the shared client in; the session cookies stay on the client."""

    async def _login_as(email: str, password: str, role: str):
        client.cookies.clear()
        response = await client.post(
            "/api/auth/login",
            json={"email": email, "password": password, "role": role},
        )
        assert response.status_code == 200, response.text
        return response

    return _login_as


@pytest.fixture
async def admin(make_user):
    user, _ = await make_user(
        "admin@college.edu", ADMIN_PASSWORD, "academic", sub_role="administrative", name="Ada Admin"
    )
    return user


@pytest.fixture
async def faculty_member(make_user):
    user, _ = await make_user(
        "prof@college.edu",
        FACULTY_PASSWORD,
        "academic",
        sub_role="faculty",
        name="Paul Professor",
        department="Physics",
    )
    return user


@pytest.fixture
async def student(make_user):
    user, profile = await make_user(
        "s1@college.edu", STUDENT_PASSWORD, "student", first_name="Stu", last_name="Dent",
        department="Physics", year=2,
    )
    return user, profile
