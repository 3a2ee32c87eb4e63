import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizmaster.core.security import create_access_token, get_password_hash
from quizmaster.db.base import Base
from quizmaster.db.models import Question, User, UserRole
from quizmaster.db.session import get_db
from quizmaster.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Hashing is slow on purpose; every fixture user shares one password.
PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)


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
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, name="alice", role=UserRole.USER, is_active=True):
    user = User(
        name=name,
        email=f"{name}@example.com",
        password_hash=PASSWORD_HASH,
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_question(db, text, correct="Paris", category="general", level="easy"):
    question = Question(
        question_text=text,
        correct_answer=correct,
        category=category,
        level=level,
    )
    question.options = [correct, "Option B", "Option C", "Option D"]
    db.add(question)
    db.commit()
    db.refresh(question)
    return question


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, name="admin", role=UserRole.ADMIN)


@pytest.fixture
def questions(db):
    return [make_question(db, f"Question number {i}?", correct=f"Answer {i}") for i in range(5)]
