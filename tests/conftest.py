"""
Shared fixtures: in-memory Motor database, seeded users and courses, and an
API client wired to that database.
"""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from learnhub import config
from learnhub.auth.auth_utils import create_token
from learnhub.courses import database as store
from learnhub.database import create_indexes, get_db
from learnhub.main import create_app

STUDENT = {"user_id": "USR_STUDENT", "username": "Alice Learner", "email_id": "alice@example.com",
           "role": "student", "is_active": True, "bio": ""}
OTHER_STUDENT = {"user_id": "USR_OTHER", "username": "Bob Learner", "email_id": "bob@example.com",
                 "role": "student", "is_active": True, "bio": ""}
TEACHER = {"user_id": "USR_TEACHER", "username": "Prof. Ada", "email_id": "ada@example.com",
           "role": "teacher", "is_active": True, "bio": "Teaches Python"}
OTHER_TEACHER = {"user_id": "USR_TEACHER2", "username": "Prof. Grace", "email_id": "grace@example.com",
                 "role": "teacher", "is_active": True, "bio": ""}
ADMIN = {"user_id": "USR_ADMIN", "username": "Root", "email_id": "admin@example.com",
         "role": "admin", "is_active": True, "bio": ""}


@pytest.fixture(autouse=True)
def certificates_dir(tmp_path, monkeypatch):
    """Rendered certificates go to a per-test directory"""
    path = tmp_path / "certificates"
    monkeypatch.setattr(config, "CERTIFICATES_DIR", str(path))
    return path


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["learnhub_test"]
    await create_indexes(database)

    for user in (STUDENT, OTHER_STUDENT, TEACHER, OTHER_TEACHER, ADMIN):
        await database.users_profile.insert_one({**user, "created_at": datetime.utcnow()})

    return database


@pytest.fixture
def make_course(db):
    """Create a course owned by TEACHER with the given number of sections"""
    async def _make(sections: int = 2, status: str = "published", price: float = 0, title: str = "Python Basics"):
        course = await store.create_course(db, {
            "title": title,
            "description": "Learn Python from scratch",
            "categories": ["Programming"],
            "price": price,
            "level": "beginner",
            "status": status
        }, TEACHER)
        for i in range(sections):
            course = await store.add_section(db, course, {
                "title": f"Section {i + 1}",
                "description": "Lesson",
                "content": "Content",
                "duration": 10
            })
        return course
    return _make


def auth_header(user: dict) -> dict:
    return {"Authorization": f"Bearer {create_token(user['user_id'])}"}


@pytest.fixture
async def client(db):
    app = create_app(connect_db=False)
    app.dependency_overrides[get_db] = lambda: db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def users():
    return {"student": STUDENT, "other_student": OTHER_STUDENT, "teacher": TEACHER,
            "other_teacher": OTHER_TEACHER, "admin": ADMIN}


@pytest.fixture
def headers(users):
    """Bearer headers by role name, e.g. headers("student")"""
    return lambda role: auth_header(users[role])
