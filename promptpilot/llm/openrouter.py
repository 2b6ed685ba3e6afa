"""OpenRouter API client - thin wrapper over the chat-completions REST API."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from promptpilot.errors import ConfigurationError, UpstreamProviderError
from promptpilot.llm.schemas import CompletionResponse, Message
from promptpilot.prompts.schemas import ModelDescriptor, ModelPricing

logger = logging.getLogger(__name__)

PromptInput = str | list[str] | list[dict] | list[Message]


def to_messages(prompt: PromptInput) -> list[dict]:
    """
    Normalize prompt input into a chat message list.

    - "text" -> one user message
    - ["a", "b"] -> one user message per string
    - [{"role": ..., "content": ...}] -> used as given
    """
    if isinstance(prompt, str):
        return [{"role": "user", "content": prompt}]
    messages = []
    for item in prompt:
        if isinstance(item, str):
            messages.append({"role": "user", "content": item})
        elif isinstance(item, Message):
            messages.append(item.model_dump())
        else:
            messages.append(Message.model_validate(item).model_dump())
    return messages


class OpenRouterClient:
    """Client for the OpenRouter API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://openrouter.ai/api/v1",
        site_url: str = "http://localhost:3000",
        app_title: str = "PromptPilot",
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.client = httpx.Client(
            base_url=base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key or ''}",
                "HTTP-Referer": site_url,
                "X-Title": app_title,
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def generate_completion(
        self,
        model: str,
        prompt: PromptInput,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        top_p: float = 1.0,
        stream: bool = False,
    ) -> CompletionResponse:
        """
        Request a chat completion.

        Args:
            model: Vendor-qualified model id, e.g. "openai/gpt-4o"
            prompt: A string, a list of strings or a list of chat messages
            max_tokens: Completion token limit
            temperature: Sampling temperature
            top_p: Nucleus sampling threshold
            stream: Forwarded to the provider; only non-streamed replies are parsed

        Returns:
            Parsed completion with choices and token usage

        Raises:
            ConfigurationError: API key is not configured
            UpstreamProviderError: Provider call failed or returned a malformed body
        """
        payload = {
            "model": model,
            "messages": to_messages(prompt),
            "max_tokens": max_tokens,
            "temperature": temperature,
            "top_p": top_p,
            "stream": stream,
        }

        logger.info(f"Requesting completion from {model} (max_tokens={max_tokens})")
        data = self._request("POST", "/chat/completions", json=payload)

        if data.get("usage") is None:
            data.pop("usage", None)
        data.setdefault("model", model)

        try:
            completion = CompletionResponse.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Malformed completion from {model}: {e}")
            raise UpstreamProviderError("Malformed completion response from provider") from e

        if not completion.choices:
            raise UpstreamProviderError("Provider returned no completion choices")

        logger.info(
            f"Completion from {completion.model}: {completion.total_tokens} tokens, "
            f"finish_reason={completion.finish_reason}"
        )
        return completion

    def get_available_models(self) -> list[ModelDescriptor]:
        """Fetch the provider's model catalog."""
        data = self._request("GET", "/models")

        models = []
        for item in data.get("data", []):
            descriptor = self._to_descriptor(item)
            if descriptor is not None:
                models.append(descriptor)

        logger.info(f"Fetched {len(models)} models from OpenRouter")
        return models

    def _request(self, method: str, path: str, **kwargs) -> dict:
        if not self.api_key:
            msg = "OpenRouter API key is required but not found in environment variables"
            raise ConfigurationError(msg)

        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"OpenRouter {method} {path} failed with {status}: {e.response.text[:200]}")
            if status == 401:  # noqa: PLR2004
                message = "Authentication failed with OpenRouter API"
            elif status == 429:  # noqa: PLR2004
                message = "Rate limit exceeded with OpenRouter API"
            else:
                message = "OpenRouter API request failed"
            raise UpstreamProviderError.from_status(
                status, message, details={"status": status, "body": e.response.text[:500]}
            ) from e
        except httpx.RequestError as e:
            logger.error(f"OpenRouter {method} {path} transport error: {e}")
            raise UpstreamProviderError("Could not reach OpenRouter API") from e
        except ValueError as e:
            logger.error(f"OpenRouter {method} {path} returned invalid JSON: {e}")
            raise UpstreamProviderError("Invalid JSON from OpenRouter API") from e

        if not isinstance(data, dict):
            raise UpstreamProviderError("Unexpected response shape from OpenRouter API")
        return data

    def _to_descriptor(self, item: dict) -> ModelDescriptor | None:
        """Convert a catalog entry; pricing is per token upstream, per 1K here."""
        pricing = item.get("pricing") or {}
        try:
            return ModelDescriptor(
                id=item["id"],
                name=item.get("name") or item["id"],
                description=item.get("description"),
                context_length=item.get("context_length"),
                pricing=ModelPricing(
                    prompt=float(pricing.get("prompt", 0)) * 1000,
                    completion=float(pricing.get("completion", 0)) * 1000,
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping catalog entry {item.get('id')}: {e}")
            return None
