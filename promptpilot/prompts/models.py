import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptpilot.base import Base
from promptpilot.prompts.schemas import Category


def utcnow() -> datetime:
    return datetime.now(UTC)


class PromptRecord(Base):
    __tablename__ = "prompts"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    improved_text: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[Category] = mapped_column(
        Enum(
            Category,
            name="promptcategory",
            native_enum=False,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=Category.CHAT,
    )
    model_used: Mapped[str] = mapped_column(String(255), nullable=False)
    tokens: Mapped[int] = mapped_column(Integer, default=0)
    quality_score: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )
