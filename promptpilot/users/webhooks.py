"""Identity-provider webhook handling.

Events are signed with svix. After verification, user lifecycle events keep
the local ``users`` table in sync with the identity provider:

- user.created: insert the user
- user.updated: update email/name (insert if unknown)
- user.deleted: remove the user
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from svix.webhooks import Webhook
from svix.webhooks import WebhookVerificationError as SvixVerificationError

from promptpilot.errors import (
    ConfigurationError,
    PersistenceError,
    ValidationError,
    WebhookVerificationError,
)
from promptpilot.logging import bind_user
from promptpilot.users import repository as repo

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def verify_webhook(secret: str | None, payload: bytes, headers: dict[str, str]) -> dict:
    """
    Verify a signed webhook payload.

    Args:
        secret: Signing secret ("whsec_...")
        payload: Raw request body, exactly as received
        headers: Request headers (lowercase keys)

    Returns:
        The decoded event
    """
    svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        raise WebhookVerificationError("Missing svix headers")

    if not secret:
        raise ConfigurationError("Missing webhook secret")

    try:
        return Webhook(secret).verify(payload, svix_headers)
    except SvixVerificationError as e:
        logger.error(f"Error verifying webhook: {e}")
        raise WebhookVerificationError() from e


def _full_name(data: dict) -> str | None:
    first = data.get("first_name") or ""
    last = data.get("last_name") or ""
    return f"{first} {last}".strip() or None


def _primary_email(data: dict) -> str | None:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    for address in addresses:
        if primary_id and address.get("id") == primary_id:
            return address.get("email_address")
    return addresses[0].get("email_address") if addresses else None


class UserWebhookHandler:
    """Applies user lifecycle events to the local database."""

    def __init__(self, db: Session):
        self.db = db

    def handle(self, event: dict) -> None:
        event_type = event.get("type")
        data = event.get("data") or {}
        logger.info(f"Webhook with ID: {data.get('id')} and type: {event_type}")

        handlers = {
            "user.created": self.user_created,
            "user.updated": self.user_updated,
            "user.deleted": self.user_deleted,
        }
        handler = handlers.get(event_type)
        if handler is None:
            logger.info(f"Unhandled event type: {event_type}")
            return

        try:
            with bind_user(data.get("id")):
                handler(data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Error processing webhook {event_type}")
            raise PersistenceError("Error processing webhook") from e

    def user_created(self, data: dict) -> None:
        clerk_id = data.get("id")
        email = _primary_email(data)
        if not clerk_id or not email:
            raise ValidationError("Missing required user data")

        # Redelivered events must not trip the unique clerk_id constraint
        if repo.get_user_by_clerk_id(self.db, clerk_id) is not None:
            repo.update_user(self.db, clerk_id, email=email, name=_full_name(data))
            logger.info(f"User {clerk_id} already exists, updated from created event")
            return

        repo.create_user(self.db, clerk_id=clerk_id, email=email, name=_full_name(data))
        logger.info(f"User created: {clerk_id}")

    def user_updated(self, data: dict) -> None:
        clerk_id = data.get("id")
        if not clerk_id:
            raise ValidationError("Missing required user data")

        if repo.get_user_by_clerk_id(self.db, clerk_id) is None:
            self.user_created(data)
            return

        changes = {}
        email = _primary_email(data)
        if email:
            changes["email"] = email
        name = _full_name(data)
        if name:
            changes["name"] = name

        if changes:
            repo.update_user(self.db, clerk_id, **changes)
        logger.info(f"User updated: {clerk_id}")

    def user_deleted(self, data: dict) -> None:
        clerk_id = data.get("id")
        if not clerk_id:
            raise ValidationError("Missing required user data")

        if repo.delete_user(self.db, clerk_id):
            logger.info(f"User deleted: {clerk_id}")
        else:
            logger.info(f"User {clerk_id} already absent, nothing to delete")
