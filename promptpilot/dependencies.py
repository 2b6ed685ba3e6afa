"""Per-request service construction.

Clients are built here and injected into handlers, so tests can swap any of
them through ``app.dependency_overrides``.
"""

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from promptpilot.config import settings
from promptpilot.database import get_db
from promptpilot.llm.openrouter import OpenRouterClient
from promptpilot.prompts.service import PromptService
from promptpilot.users.confirmation import SupabaseAuthClient


def get_llm_client() -> Generator[OpenRouterClient]:
    client = OpenRouterClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        site_url=settings.openrouter_site_url,
        app_title=settings.openrouter_app_title,
        timeout=settings.openrouter_timeout,
    )
    try:
        yield client
    finally:
        client.close()


def get_prompt_service(
    db: Session = Depends(get_db),
    llm: OpenRouterClient = Depends(get_llm_client),
) -> PromptService:
    return PromptService(db, llm)


def get_auth_client() -> SupabaseAuthClient:
    return SupabaseAuthClient(url=settings.supabase_url, anon_key=settings.supabase_anon_key)
