"""Static model recommendations and catalog."""

from promptpilot.prompts.schemas import Category, ModelDescriptor, ModelPricing

# Category -> preferred model ids, most preferred first
MODEL_RECOMMENDATIONS: dict[Category, tuple[str, str, str]] = {
    Category.CHAT: (
        "openai/gpt-4o",
        "anthropic/claude-3-opus",
        "anthropic/claude-3-sonnet",
    ),
    Category.CODE: (
        "openai/gpt-3.5-turbo",
        "anthropic/claude-3-haiku",
        "mistralai/mistral-7b-instruct",
    ),
    Category.REASONING: (
        "anthropic/claude-3-opus",
        "anthropic/claude-3-sonnet",
        "meta-llama/llama-3-70b-instruct",
    ),
    Category.WRITING: (
        "anthropic/claude-3-opus",
        "openai/gpt-4o",
        "meta-llama/llama-3-70b-instruct",
    ),
    Category.MULTIMODAL: (
        "openai/gpt-4o",
        "anthropic/claude-3-opus",
        "anthropic/claude-3-sonnet",
    ),
}


def get_model_recommendation(category: Category | str) -> list[str]:
    """Return the ordered model ids for a category (chat for unknown values)."""
    try:
        key = Category(category)
    except ValueError:
        key = Category.CHAT
    return list(MODEL_RECOMMENDATIONS[key])


MODEL_CATALOG: list[ModelDescriptor] = [
    ModelDescriptor(
        id="openai/gpt-4o",
        name="GPT-4o",
        description="OpenAI's most advanced model, optimized for chat and multimodal tasks",
        context_length=128000,
        pricing=ModelPricing(prompt=0.01, completion=0.03),
        category=Category.CHAT,
    ),
    ModelDescriptor(
        id="anthropic/claude-3-opus",
        name="Claude 3 Opus",
        description="Anthropic's most capable model for complex reasoning tasks",
        context_length=200000,
        pricing=ModelPricing(prompt=0.015, completion=0.075),
        category=Category.REASONING,
    ),
    ModelDescriptor(
        id="anthropic/claude-3-sonnet",
        name="Claude 3 Sonnet",
        description="Balanced performance and cost for most tasks",
        context_length=180000,
        pricing=ModelPricing(prompt=0.003, completion=0.015),
        category=Category.WRITING,
    ),
    ModelDescriptor(
        id="anthropic/claude-3-haiku",
        name="Claude 3 Haiku",
        description="Fast and cost-effective for simpler tasks",
        context_length=150000,
        pricing=ModelPricing(prompt=0.00025, completion=0.00125),
        category=Category.CHAT,
    ),
    ModelDescriptor(
        id="openai/gpt-3.5-turbo",
        name="GPT-3.5 Turbo",
        description="Fast and cost-effective for coding and simpler tasks",
        context_length=16000,
        pricing=ModelPricing(prompt=0.0005, completion=0.0015),
        category=Category.CODE,
    ),
    ModelDescriptor(
        id="mistralai/mistral-7b-instruct",
        name="Mistral 7B Instruct",
        description="Efficient open-source model for various tasks",
        context_length=32000,
        pricing=ModelPricing(prompt=0.0002, completion=0.0002),
        category=Category.CODE,
    ),
    ModelDescriptor(
        id="meta-llama/llama-3-70b-instruct",
        name="Llama 3 70B Instruct",
        description="Meta's powerful open-source model for complex tasks",
        context_length=8000,
        pricing=ModelPricing(prompt=0.0009, completion=0.0009),
        category=Category.REASONING,
    ),
]


def list_catalog(category: Category | None = None) -> list[ModelDescriptor]:
    """Static catalog, optionally filtered by category."""
    if category is None:
        return list(MODEL_CATALOG)
    return [model for model in MODEL_CATALOG if model.category == category]
