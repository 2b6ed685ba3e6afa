"""Signup confirmation emails through the hosted auth subsystem."""

import logging

import httpx

from promptpilot.errors import ConfigurationError, ConfirmationEmailError

logger = logging.getLogger(__name__)


class SupabaseAuthClient:
    """Client for the Supabase GoTrue REST API - only what this service needs."""

    def __init__(
        self,
        url: str | None,
        anon_key: str | None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.anon_key = anon_key
        self.transport = transport

    def _build_headers(self) -> dict[str, str]:
        return {
            "apikey": self.anon_key or "",
            "Authorization": f"Bearer {self.anon_key}",
            "Content-Type": "application/json",
        }

    def resend_signup_confirmation(self, email: str) -> None:
        """Ask the auth subsystem to resend the signup confirmation email."""
        if not self.url or not self.anon_key:
            msg = "SUPABASE_URL and SUPABASE_ANON_KEY are required to send confirmation emails"
            raise ConfigurationError(msg)

        try:
            with httpx.Client(transport=self.transport) as client:
                response = client.post(
                    f"{self.url.rstrip('/')}/auth/v1/resend",
                    headers=self._build_headers(),
                    json={"type": "signup", "email": email},
                )
        except httpx.RequestError as e:
            logger.error(f"Error resending confirmation email: {e}")
            raise ConfirmationEmailError(details={"message": str(e)}) from e

        if response.is_error:
            body = self._error_body(response)
            message = body.get("msg") or body.get("message") or body.get("error_description")
            code = body.get("error_code") or body.get("code") or response.status_code
            logger.error(f"Error resending confirmation email ({code}): {message}")
            raise ConfirmationEmailError(details={"message": message, "code": code})

        logger.info("Confirmation email sent")

    @staticmethod
    def _error_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {"message": response.text[:200]}
        return body if isinstance(body, dict) else {}
