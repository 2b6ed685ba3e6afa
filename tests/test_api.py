"""API tests for critical paths."""

import uuid

from fastapi.testclient import TestClient
from starlette import status

from promptpilot.errors import UpstreamProviderError
from promptpilot.prompts.models import PromptRecord
from promptpilot.prompts.schemas import Category
from tests.conftest import TEST_USER_ID, make_completion


def test_health_check(client: TestClient):
    """Health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"


def test_generate_prompt_stores_record(client: TestClient, db, user, mock_llm):
    """POST /prompt/generate categorizes the generated text and records it."""
    mock_llm.generate_completion.return_value = make_completion(
        "Write a 1,200-word blog post explaining how AI models are trained.",
        total_tokens=256,
    )

    response = client.post("/prompt/generate", json={"goal": "Write a blog post about AI"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    # "explaining" puts the generated text in the reasoning tier
    assert data["category"] == "reasoning"
    assert data["tokens"] == 256  # noqa: PLR2004

    record = db.query(PromptRecord).one()
    assert record.user_id == TEST_USER_ID
    assert record.original_text == "Write a blog post about AI"
    assert record.improved_text == data["prompt"]
    assert record.category == Category.REASONING
    assert record.tokens == 256  # noqa: PLR2004
    assert record.quality_score == 0

    db.refresh(user)
    assert user.usage_count == 1


def test_improve_prompt(client: TestClient, db, user, mock_llm):
    """POST /prompt/improve returns original and improved text."""
    mock_llm.generate_completion.return_value = make_completion(
        "Draft a friendly, concise reminder email for a team meeting.", total_tokens=80
    )

    response = client.post(
        "/prompt/improve",
        json={"prompt": "meeting email", "feedback": "make it friendlier"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["original"] == "meeting email"
    assert data["improved"].startswith("Draft a friendly")
    assert data["category"] == "writing"
    assert db.query(PromptRecord).count() == 1


def test_invoke_model(client: TestClient, db, user, mock_llm):
    """POST /invoke forwards sampling params and categorizes the input prompt."""
    mock_llm.generate_completion.return_value = make_completion(
        "def add(a, b): return a + b", total_tokens=30, model="openai/gpt-3.5-turbo"
    )

    response = client.post(
        "/invoke",
        json={"model": "openai/gpt-3.5-turbo", "prompt": "Write a Python function to add", "temperature": 0},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "response": "def add(a, b): return a + b",
        "model": "openai/gpt-3.5-turbo",
        "tokens": 30,
        "finish_reason": "stop",
    }

    kwargs = mock_llm.generate_completion.call_args.kwargs
    assert kwargs["temperature"] == 0
    assert kwargs["max_tokens"] == 1024  # noqa: PLR2004
    assert kwargs["top_p"] == 1.0

    record = db.query(PromptRecord).one()
    assert record.category == Category.CODE
    assert record.model_used == "openai/gpt-3.5-turbo"


def test_recommend_with_explicit_category(client: TestClient, user, mock_llm):
    """User-supplied category is trusted with confidence 1.0 and no LLM call."""
    response = client.post(
        "/model/recommend",
        json={"prompt": "Help me with my essay", "category": "reasoning"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["category"] == "reasoning"
    assert data["confidence"] == 1.0
    assert data["recommendedModels"] == [
        "anthropic/claude-3-opus",
        "anthropic/claude-3-sonnet",
        "meta-llama/llama-3-70b-instruct",
    ]
    assert "tokens" not in data
    mock_llm.generate_completion.assert_not_called()


def test_recommend_with_classifier(client: TestClient, user, mock_llm):
    """Without a category, the classifier reply drives the recommendation."""
    mock_llm.generate_completion.return_value = make_completion("code,0.85", total_tokens=12)

    response = client.post("/model/recommend", json={"prompt": "Fix my segfault please"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["category"] == "code"
    assert data["confidence"] == 0.85  # noqa: PLR2004
    assert data["tokens"] == 12  # noqa: PLR2004
    assert data["recommendedModels"][0] == "openai/gpt-3.5-turbo"


def test_short_prompt_rejected_with_field_detail(client: TestClient, mock_llm):
    """A prompt shorter than 5 characters is a 400 naming the prompt field."""
    response = client.post("/model/recommend", json={"prompt": "hey"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Invalid request"
    assert [d["field"] for d in body["details"]] == ["prompt"]
    mock_llm.generate_completion.assert_not_called()


def test_invoke_lists_every_invalid_field(client: TestClient, db):
    """All violations are reported and nothing is stored."""
    response = client.post(
        "/invoke",
        json={"model": "", "prompt": "Tell me a joke", "temperature": 3, "top_p": -0.1, "max_tokens": 0},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {d["field"] for d in response.json()["details"]}
    assert fields == {"model", "temperature", "top_p", "max_tokens"}
    assert db.query(PromptRecord).count() == 0


def test_invalid_category_rejected(client: TestClient):
    response = client.post("/model/recommend", json={"prompt": "Hello world", "category": "poetry"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "category"


def test_unauthenticated_request_rejected(anonymous_client: TestClient, mock_llm):
    """No session token means 401 before anything else happens."""
    response = anonymous_client.post("/prompt/generate", json={"goal": "Write a blog post about AI"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Unauthorized"
    mock_llm.generate_completion.assert_not_called()


def test_upstream_rate_limit_surfaces_as_429(client: TestClient, user, mock_llm, db):
    mock_llm.generate_completion.side_effect = UpstreamProviderError.from_status(
        429, "Rate limit exceeded with OpenRouter API"
    )

    response = client.post("/prompt/improve", json={"prompt": "Summarize this article"})

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.json()["error"] == "Rate limit exceeded with OpenRouter API"
    assert db.query(PromptRecord).count() == 0


def test_get_prompt_result(client: TestClient, db):
    """GET /prompt/result returns the caller's own record."""
    record = PromptRecord(
        user_id=TEST_USER_ID,
        original_text="Explain quantum computing",
        improved_text="Explain quantum computing to an undergraduate...",
        category=Category.REASONING,
        model_used="anthropic/claude-3-opus",
        tokens=215,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    response = client.get("/prompt/result", params={"id": str(record.id)})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["prompt"] == "Explain quantum computing"
    assert data["model"] == "anthropic/claude-3-opus"
    assert data["category"] == "reasoning"
    assert data["tokens"] == 215  # noqa: PLR2004


def test_get_prompt_result_of_other_user_is_404(client: TestClient, db):
    record = PromptRecord(
        user_id="user_someone_else",
        original_text="Private prompt",
        model_used="openai/gpt-4o",
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    response = client.get("/prompt/result", params={"id": str(record.id)})
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.get("/prompt/result", params={"id": str(uuid.uuid4())})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_get_prompt_result_requires_id(client: TestClient):
    response = client.get("/prompt/result")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["details"][0]["field"] == "id"


def test_prompt_history(client: TestClient, db):
    db.add_all([
        PromptRecord(user_id=TEST_USER_ID, original_text="first", model_used="openai/gpt-4o"),
        PromptRecord(user_id=TEST_USER_ID, original_text="second", model_used="openai/gpt-4o"),
        PromptRecord(user_id="user_other", original_text="hidden", model_used="openai/gpt-4o"),
    ])
    db.commit()

    response = client.get("/prompt/history")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 2  # noqa: PLR2004
    assert {p["prompt"] for p in data["prompts"]} == {"first", "second"}


def test_list_models_by_category(client: TestClient):
    response = client.get("/models", params={"category": "reasoning"})

    assert response.status_code == status.HTTP_200_OK
    ids = [m["id"] for m in response.json()["models"]]
    assert ids == ["anthropic/claude-3-opus", "meta-llama/llama-3-70b-instruct"]


def test_invoke_rejects_stringly_typed_parameters(client: TestClient, db, mock_llm):
    """Numbers and flags sent as strings are schema violations, not coerced."""
    response = client.post(
        "/invoke",
        json={
            "model": "openai/gpt-4o",
            "prompt": "Tell me a joke",
            "max_tokens": "100",
            "temperature": "0.5",
            "stream": "yes",
        },
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {d["field"] for d in response.json()["details"]}
    assert fields == {"max_tokens", "temperature", "stream"}
    mock_llm.generate_completion.assert_not_called()
    assert db.query(PromptRecord).count() == 0
