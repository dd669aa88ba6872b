"""Error taxonomy shared by every component, plus the MCP tool error helper."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class DealerDeskError(Exception):
    """Base class for all errors raised by the dealer desk."""


class ValidationError(DealerDeskError):
    """A required field is missing or a supplied field is malformed."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(DealerDeskError):
    """An operation targeted an id that does not exist."""

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(f"No record '{record_id}' in {table}.")
        self.table = table
        self.record_id = record_id


class PersistenceError(DealerDeskError):
    """The row store failed (constraint violation, I/O fault, ...)."""


class DispatchError(DealerDeskError):
    """A notification could not be rendered or delivered."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status = status
        self.details = details or {}


class UnauthorizedError(DealerDeskError):
    """An admin operation ran without a valid session."""

    def __init__(self, message: str = "Session is missing or expired.") -> None:
        super().__init__(message)


def log_and_return_tool_error(*, tool_name: str, exc: Exception, user_message: str) -> str:
    """Log an unexpected tool failure and hand back a caller-safe message."""
    logger.exception("Tool %s failed: %s", tool_name, exc)
    return user_message
