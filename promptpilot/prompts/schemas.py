from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    CHAT = "chat"
    CODE = "code"
    REASONING = "reasoning"
    WRITING = "writing"
    MULTIMODAL = "multimodal"


class InvokeRequest(BaseModel):
    # Sampling parameters must arrive as JSON numbers and booleans, not strings
    model: str = Field(min_length=1, description="Vendor-qualified model id")
    prompt: str = Field(min_length=5)
    max_tokens: int = Field(default=1024, gt=0, strict=True)
    temperature: float = Field(default=0.7, ge=0, le=2, strict=True)
    top_p: float = Field(default=1.0, ge=0, le=1, strict=True)
    stream: bool = Field(default=False, strict=True)


class InvokeResponse(BaseModel):
    response: str
    model: str
    tokens: int
    finish_reason: str | None


class RecommendRequest(BaseModel):
    prompt: str = Field(min_length=5)
    category: Category | None = None


class RecommendResponse(BaseModel):
    category: Category
    recommended_models: list[str] = Field(serialization_alias="recommendedModels")
    confidence: float
    tokens: int | None = None


class GenerateRequest(BaseModel):
    goal: str = Field(min_length=5)
    context: str | None = None


class GenerateResponse(BaseModel):
    prompt: str
    category: Category
    tokens: int


class ImproveRequest(BaseModel):
    prompt: str = Field(min_length=5)
    feedback: str | None = None


class ImproveResponse(BaseModel):
    original: str
    improved: str
    category: Category
    tokens: int


class PromptResultResponse(BaseModel):
    id: UUID
    prompt: str = Field(validation_alias="original_text")
    response: str = Field(validation_alias="improved_text")
    model: str = Field(validation_alias="model_used")
    category: Category
    tokens: int
    quality_score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PromptHistoryResponse(BaseModel):
    prompts: list[PromptResultResponse]
    total: int


class ModelPricing(BaseModel):
    prompt: float = Field(ge=0, description="Cost per 1K prompt tokens")
    completion: float = Field(ge=0, description="Cost per 1K completion tokens")


class ModelDescriptor(BaseModel):
    id: str
    name: str
    description: str | None = None
    context_length: int = Field(gt=0)
    pricing: ModelPricing
    category: Category | None = None


class ModelListResponse(BaseModel):
    models: list[ModelDescriptor]
    total: int
