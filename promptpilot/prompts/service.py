"""Prompt engineering business logic."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from promptpilot.config import settings
from promptpilot.errors import NotFound, PersistenceError
from promptpilot.llm.openrouter import OpenRouterClient
from promptpilot.llm.prompts import (
    build_classify_messages,
    build_generate_messages,
    build_improve_messages,
)
from promptpilot.prompts import repository as repo
from promptpilot.prompts.categorizer import categorize, parse_classification
from promptpilot.prompts.models import PromptRecord
from promptpilot.prompts.recommendations import get_model_recommendation
from promptpilot.prompts.schemas import (
    Category,
    GenerateResponse,
    ImproveResponse,
    InvokeRequest,
    InvokeResponse,
    RecommendResponse,
)
from promptpilot.users import repository as user_repo

logger = logging.getLogger(__name__)


class PromptService:
    """Generates, improves and routes prompts, recording each interaction."""

    def __init__(
        self,
        db: Session,
        llm: OpenRouterClient,
        model: str | None = None,
        classifier_model: str | None = None,
    ):
        self.db = db
        self.llm = llm
        self.model = model or settings.prompt_model
        self.classifier_model = classifier_model or settings.classifier_model

    def generate_prompt(self, user_id: str, goal: str, context: str | None = None) -> GenerateResponse:
        """Craft a prompt for the user's goal."""
        completion = self.llm.generate_completion(
            model=self.model,
            prompt=build_generate_messages(goal, context),
            max_tokens=1024,
            temperature=0.7,
        )
        generated = completion.text.strip()
        category = categorize(generated)

        self._record(
            user_id,
            original_text=goal,
            improved_text=generated,
            category=category,
            model_used=self.model,
            tokens=completion.total_tokens,
        )

        logger.info(f"Generated {category.value} prompt ({completion.total_tokens} tokens)")
        return GenerateResponse(prompt=generated, category=category, tokens=completion.total_tokens)

    def improve_prompt(self, user_id: str, prompt: str, feedback: str | None = None) -> ImproveResponse:
        """Rewrite an existing prompt, optionally guided by feedback."""
        completion = self.llm.generate_completion(
            model=self.model,
            prompt=build_improve_messages(prompt, feedback),
            max_tokens=1024,
            temperature=0.7,
        )
        improved = completion.text.strip()
        category = categorize(improved)

        self._record(
            user_id,
            original_text=prompt,
            improved_text=improved,
            category=category,
            model_used=self.model,
            tokens=completion.total_tokens,
        )

        logger.info(f"Improved {category.value} prompt ({completion.total_tokens} tokens)")
        return ImproveResponse(
            original=prompt,
            improved=improved,
            category=category,
            tokens=completion.total_tokens,
        )

    def invoke_model(self, user_id: str, request: InvokeRequest) -> InvokeResponse:
        """Run the user's prompt against the requested model."""
        if request.stream:
            logger.debug("Streaming requested; returning a buffered completion")

        completion = self.llm.generate_completion(
            model=request.model,
            prompt=request.prompt,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            top_p=request.top_p,
            stream=False,
        )
        category = categorize(request.prompt)

        self._record(
            user_id,
            original_text=request.prompt,
            improved_text=completion.text,
            category=category,
            model_used=request.model,
            tokens=completion.total_tokens,
        )

        return InvokeResponse(
            response=completion.text,
            model=completion.model,
            tokens=completion.total_tokens,
            finish_reason=completion.finish_reason,
        )

    def recommend_model(
        self, user_id: str, prompt: str, category: Category | None = None
    ) -> RecommendResponse:
        """
        Recommend models for a prompt.

        A user-supplied category is trusted with confidence 1.0. Otherwise the
        classifier model labels the prompt and its reported confidence is used.
        """
        if category is not None:
            self._increment_usage(user_id)
            return RecommendResponse(
                category=category,
                recommended_models=get_model_recommendation(category),
                confidence=1.0,
            )

        completion = self.llm.generate_completion(
            model=self.classifier_model,
            prompt=build_classify_messages(prompt),
            max_tokens=20,
            temperature=0.3,
        )
        detected, confidence = parse_classification(completion.text)
        logger.info(f"Classified prompt as {detected.value} (confidence={confidence})")

        self._increment_usage(user_id)
        return RecommendResponse(
            category=detected,
            recommended_models=get_model_recommendation(detected),
            confidence=confidence,
            tokens=completion.total_tokens,
        )

    def get_result(self, user_id: str, prompt_id: UUID) -> PromptRecord:
        """Fetch a stored interaction owned by the user."""
        try:
            record = repo.get_prompt_for_user(self.db, prompt_id, user_id)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to fetch prompt {prompt_id}")
            raise PersistenceError("Failed to fetch prompt") from e

        if record is None:
            raise NotFound("Prompt not found")
        return record

    def list_history(self, user_id: str, limit: int = 50) -> tuple[list[PromptRecord], int]:
        """The user's interactions, newest first, plus the total count."""
        try:
            records = repo.get_user_prompts(self.db, user_id, limit=limit)
            total = repo.count_user_prompts(self.db, user_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch prompt history")
            raise PersistenceError("Failed to fetch prompt history") from e
        return records, total

    def _record(self, user_id: str, **fields) -> PromptRecord:
        """Store the interaction and bump the user's usage counter."""
        try:
            record = repo.create_prompt_record(
                self.db, user_id=user_id, quality_score=0, **fields
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to save prompt")
            raise PersistenceError("Failed to save prompt") from e

        self._increment_usage(user_id)
        return record

    def _increment_usage(self, user_id: str) -> None:
        try:
            updated = user_repo.increment_usage(self.db, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to increment usage")
            raise PersistenceError("Failed to update usage count") from e

        if not updated:
            logger.warning(f"No local user record for {user_id}; usage not counted")
