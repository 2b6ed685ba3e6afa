"""Database operations for stored prompt interactions."""

from uuid import UUID

from sqlalchemy.orm import Session

from promptpilot.prompts.models import PromptRecord


def create_prompt_record(db: Session, **fields) -> PromptRecord:
    """
    Insert a prompt interaction.

    Accepts: user_id, original_text, improved_text, category, model_used,
    tokens, quality_score.
    """
    record = PromptRecord(**fields)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def get_prompt_for_user(db: Session, prompt_id: UUID, user_id: str) -> PromptRecord | None:
    """Fetch a record only if it belongs to the given user."""
    return (
        db.query(PromptRecord)
        .filter(PromptRecord.id == prompt_id, PromptRecord.user_id == user_id)
        .first()
    )


def get_user_prompts(db: Session, user_id: str, limit: int = 50) -> list[PromptRecord]:
    """Fetch a user's records, newest first."""
    return (
        db.query(PromptRecord)
        .filter(PromptRecord.user_id == user_id)
        .order_by(PromptRecord.created_at.desc())
        .limit(limit)
        .all()
    )


def count_user_prompts(db: Session, user_id: str) -> int:
    return db.query(PromptRecord).filter(PromptRecord.user_id == user_id).count()
