"""
Shared fixtures: in-memory SQLite database, TestClient and data factories
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database import Base, get_db  # noqa: E402
from app.core.security import get_password_hash, create_access_token  # noqa: E402
from app.main import app  # noqa: E402
from app.models import User, Genre, Tag, Category  # noqa: E402
from app.services.blog_service import BlogService  # noqa: E402
from app.services.comic_service import ComicService  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Sup3rSecret!"


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


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="user", verified=True, status="active", password=PASSWORD, **fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=fields.pop("email", f"user{n}@example.com"),
            username=fields.pop("username", f"user{n}"),
            password=get_password_hash(password),
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"User{n}"),
            role=role,
            status=status,
            email_verified=verified,
            **fields
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def bearer(user):
    token = create_access_token(data={"sub": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(make_user):
    return bearer(make_user(role="admin"))


@pytest.fixture
def user_headers(make_user):
    return bearer(make_user())


@pytest.fixture
def genre(db):
    genre = Genre(name="Action", slug="action", color="#FF0000")
    db.add(genre)
    db.commit()
    db.refresh(genre)
    return genre


@pytest.fixture
def tag(db):
    tag = Tag(name="Heroes", slug="heroes", type="theme")
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@pytest.fixture
def category(db):
    category = Category(name="News", slug="news")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_comic(db, genre):
    def _make_comic(title="Skyborn", status="published", genres=None, tags=None, **fields):
        data = {
            "title": title,
            "description": f"{title} description",
            "cover_image": "https://cdn.example.com/cover.jpg",
            "status": status,
            "genres": genres if genres is not None else [genre.id],
            "tags": tags or [],
            **fields
        }
        return ComicService.create_comic(db, data)

    return _make_comic


@pytest.fixture
def make_post(db, category):
    def _make_post(title="Behind the Panels", status="published", **fields):
        data = {
            "title": title,
            "content": fields.pop("content", "word " * 450),
            "author": fields.pop("author", "Ada"),
            "category": fields.pop("category", category.slug),
            "status": status,
            **fields
        }
        return BlogService.create_post(db, data)

    return _make_post
