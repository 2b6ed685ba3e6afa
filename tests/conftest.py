"""Test fixtures for API tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("AUTH_JWT_KEY", "test-session-signing-key-0123456789abcdef")
os.environ.setdefault("AUTH_JWT_ALGORITHMS", "HS256")
os.environ.setdefault("CLERK_WEBHOOK_SECRET", "whsec_dGVzdC1zZWNyZXQ=")

from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from promptpilot.auth import AuthContext, get_auth_context
from promptpilot.base import Base
from promptpilot.database import get_db
from promptpilot.dependencies import get_llm_client
from promptpilot.llm.schemas import CompletionResponse
from promptpilot.main import app
from promptpilot.users.models import User

TEST_USER_ID = "user_2abcTEST"

TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db() -> Generator[Session]:
    """Override database dependency for tests."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_completion(
    text: str,
    total_tokens: int = 42,
    model: str = "openai/gpt-4o",
    finish_reason: str = "stop",
) -> CompletionResponse:
    """Build a provider completion as OpenRouter would return it."""
    return CompletionResponse.model_validate({
        "id": "gen-123",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": finish_reason,
            }
        ],
        "usage": {
            "prompt_tokens": total_tokens // 2,
            "completion_tokens": total_tokens - total_tokens // 2,
            "total_tokens": total_tokens,
        },
    })


@pytest.fixture
def db() -> Generator[Session]:
    """Create fresh database tables for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user(db: Session) -> User:
    """Local user synced from the identity provider."""
    user = User(clerk_id=TEST_USER_ID, email="ada@example.com", name="Ada Lovelace")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def mock_llm() -> MagicMock:
    """Create mock OpenRouter client."""
    llm = MagicMock()
    llm.generate_completion.return_value = make_completion("Hello there!")
    return llm


@pytest.fixture
def client(db: Session, mock_llm: MagicMock) -> Generator[TestClient]:
    """Create authenticated test client with database and LLM overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: mock_llm
    app.dependency_overrides[get_auth_context] = lambda: AuthContext(user_id=TEST_USER_ID)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db: Session, mock_llm: MagicMock) -> Generator[TestClient]:
    """Create test client that goes through real session token verification."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_client] = lambda: mock_llm

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
