"""Structured logging with request user context."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for the authenticated user of the current request
user_context: ContextVar[str] = ContextVar("user_id", default="anonymous")


class UserContextFilter(logging.Filter):
    """Inject user_id into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "user_id"):
            record.user_id = user_context.get()
        return True


@contextmanager
def bind_user(user_id: str | None) -> Iterator[None]:
    """Tag log records emitted inside the block with ``user_id``."""
    token = user_context.set(user_id or "anonymous")
    try:
        yield
    finally:
        user_context.reset(token)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Configure logging with user context filter."""
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [user:%(user_id)s] - %(message)s"
    )

    user_filter = UserContextFilter()
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers to start fresh
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(user_filter)
    root_logger.addHandler(handler)

    # httpx logs every outbound request at INFO
    logging.getLogger("httpx").setLevel(max(root_logger.level, logging.WARNING))
