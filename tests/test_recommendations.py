"""Tests for the static recommendation table and catalog."""

from promptpilot.prompts.recommendations import (
    MODEL_CATALOG,
    get_model_recommendation,
    list_catalog,
)
from promptpilot.prompts.schemas import Category


def test_reasoning_recommendation_is_stable():
    """Same ordered list on every call, and callers cannot mutate the table."""
    first = get_model_recommendation("reasoning")
    first.append("someone/else")

    for _ in range(3):
        assert get_model_recommendation(Category.REASONING) == [
            "anthropic/claude-3-opus",
            "anthropic/claude-3-sonnet",
            "meta-llama/llama-3-70b-instruct",
        ]


def test_every_category_has_three_models():
    for category in Category:
        models = get_model_recommendation(category)
        assert len(models) == 3  # noqa: PLR2004
        assert all("/" in model for model in models)


def test_unknown_category_falls_back_to_chat():
    assert get_model_recommendation("bogus") == get_model_recommendation(Category.CHAT)


def test_list_catalog_filters_by_category():
    code_models = list_catalog(Category.CODE)

    assert {m.id for m in code_models} == {
        "openai/gpt-3.5-turbo",
        "mistralai/mistral-7b-instruct",
    }
    assert len(list_catalog()) == len(MODEL_CATALOG)
