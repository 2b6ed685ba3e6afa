"""Prompt categorization.

Buckets free text into one of five categories with an ordered keyword rule
list, and parses the "<category>,<confidence>" reply of the LLM classifier.
"""

import logging
import re

from promptpilot.prompts.schemas import Category

logger = logging.getLogger(__name__)

# Ordered rules: the first rule with a matching keyword wins.
CATEGORY_RULES: list[tuple[tuple[str, ...], Category]] = [
    (("code", "program", "function"), Category.CODE),
    (("explain", "analyze", "compare"), Category.REASONING),
    (("write", "draft", "create"), Category.WRITING),
    (("image", "picture", "visual"), Category.MULTIMODAL),
]

DEFAULT_CATEGORY = Category.CHAT

# Confidence assumed when the classifier reply carries no usable number
DEFAULT_CONFIDENCE = 0.7

LEADING_NUMBER = re.compile(r"\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


def categorize(text: str) -> Category:
    """
    Classify text by case-insensitive keyword match.

    Args:
        text: Prompt text to classify

    Returns:
        Category of the earliest matching rule, or chat if none match
    """
    lowered = (text or "").lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def normalize_category(value: str | None) -> Category:
    """Map a raw category label onto the enumeration, falling back to chat."""
    if not value:
        return DEFAULT_CATEGORY
    cleaned = value.strip().strip("\"'").strip().lower()
    try:
        return Category(cleaned)
    except ValueError:
        logger.warning(f"Unrecognized category '{value}', falling back to {DEFAULT_CATEGORY.value}")
        return DEFAULT_CATEGORY


def parse_confidence(value: str | None) -> float:
    """Read the leading number of a confidence field, clamped to [0, 1]; 0.7 when absent."""
    if value is None:
        return DEFAULT_CONFIDENCE
    match = LEADING_NUMBER.match(value.strip().strip("\"'"))
    if match is None:
        return DEFAULT_CONFIDENCE
    return min(max(float(match.group()), 0.0), 1.0)


def parse_classification(raw: str) -> tuple[Category, float]:
    """
    Parse the classifier reply.

    The classifier is instructed to answer with exactly "<category>,<confidence>",
    e.g. "code,0.85". Only the first two fields are read, and trailing text after
    the confidence number ("0.85 (confident)") is ignored.

    Returns:
        (category, confidence) with fallbacks applied
    """
    fields = (raw or "").strip().strip("\"'").split(",")
    confidence = fields[1] if len(fields) > 1 else None
    return normalize_category(fields[0]), parse_confidence(confidence)
