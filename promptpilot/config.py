from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str

    # OpenRouter configuration
    openrouter_api_key: str | None = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_site_url: str = "http://localhost:3000"
    openrouter_app_title: str = "PromptPilot"
    openrouter_timeout: float | None = None  # None disables the client timeout

    # LLM model configuration
    prompt_model: str = "openai/gpt-4o"  # For prompt generation and improvement
    classifier_model: str = "openai/gpt-3.5-turbo"  # For category detection

    # Session token verification
    auth_jwt_key: str | None = None
    auth_jwt_algorithms: str = "RS256"

    # Identity provider webhooks
    clerk_webhook_secret: str | None = None

    # Hosted auth subsystem (confirmation emails)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # CORS configuration
    cors_origins: str = "http://localhost:3000"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def validate_model_ids(self):
        """Fail fast if a configured model is not vendor-qualified."""
        for field in ("prompt_model", "classifier_model"):
            value = getattr(self, field)
            if "/" not in value:
                msg = (
                    f"{field.upper()} must be a vendor-qualified model id "
                    f"such as 'openai/gpt-4o', got '{value}'."
                )
                raise ValueError(msg)
        return self


settings = Settings()
