import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_coursehub.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"
TEST_UPLOAD_DIR = tempfile.mkdtemp(prefix="coursehub-test-uploads-")

# must be set before coursehub.core.config is imported
os.environ["COURSEHUB_DATABASE_URL"] = TEST_DB_URL
os.environ["COURSEHUB_UPLOAD_DIR"] = TEST_UPLOAD_DIR
os.environ["COURSEHUB_BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coursehub.core.deps import get_db, get_storage
from coursehub.core.security import hash_password
from coursehub.db.base import Base
from coursehub.main import app
from coursehub.models.assignment import Assignment
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.models.material import Material
from coursehub.models.submission import Submission
from coursehub.models.user import User
from coursehub.services.storage import FileStorage

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_get_storage():
    return FileStorage(TEST_UPLOAD_DIR, url_prefix="/uploads", allowed_extensions={".txt", ".pdf"})


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)
    shutil.rmtree(TEST_UPLOAD_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def seed():
    """
    Seed a clean minimal dataset for each test:

    - instructor1 owns CS101, instructor2 owns CS202
    - student1 is enrolled in CS101, student2 is enrolled nowhere
    - CS101 has one assignment, HW1 (100 points, due tomorrow)
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(Submission).delete()
        db.query(Material).delete()
        db.query(Enrollment).delete()
        db.query(Assignment).delete()
        db.query(Course).delete()
        db.query(User).delete()
        db.commit()

        def make_user(email, name, role):
            return User(email=email, full_name=name, role=role, hashed_password=PASSWORD_HASH)

        instructor1 = make_user("instructor1@example.com", "Instructor One", "instructor")
        instructor2 = make_user("instructor2@example.com", "Instructor Two", "instructor")
        student1 = make_user("student1@example.com", "Student One", "student")
        student2 = make_user("student2@example.com", "Student Two", "student")
        db.add_all([instructor1, instructor2, student1, student2])
        db.commit()

        cs101 = Course(
            name="Intro to Programming",
            description="Basics",
            code="CS101",
            instructor_id=instructor1.id,
        )
        cs202 = Course(
            name="Data Structures",
            description="Trees and friends",
            code="CS202",
            instructor_id=instructor2.id,
        )
        db.add_all([cs101, cs202])
        db.commit()

        db.add(Enrollment(course_id=cs101.id, student_id=student1.id))

        hw1 = Assignment(
            course_id=cs101.id,
            created_by_id=instructor1.id,
            title="HW1",
            description="First homework",
            due_at=datetime.now(timezone.utc) + timedelta(days=1),
            max_points=100,
        )
        db.add(hw1)
        db.commit()

        yield {
            "instructor1": instructor1.id,
            "instructor2": instructor2.id,
            "student1": student1.id,
            "student2": student2.id,
            "cs101": cs101.id,
            "cs202": cs202.id,
            "hw1": hw1.id,
        }
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage():
    return override_get_storage()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = override_get_storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth(client):
    """auth("student1") -> Authorization header for that seeded user."""
    cache = {}

    def _auth(who: str) -> dict:
        if who not in cache:
            email = who if "@" in who else f"{who}@example.com"
            r = client.post("/auth/login", json={"email": email, "password": PASSWORD})
            assert r.status_code == 200, r.text
            cache[who] = {"Authorization": f"Bearer {r.json()['access_token']}"}
        return cache[who]

    return _auth

