"""Request ID propagation through a context variable."""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Accept caller-supplied ids only if they are short and log-safe
_INCOMING_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return uuid.uuid4().hex


def resolve_request_id(incoming: Optional[str]) -> str:
    """Reuse the X-Request-ID sent by the browser when it is well formed."""
    if incoming and _INCOMING_ID.match(incoming):
        return incoming
    return generate_request_id()


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get("")


def set_request_id(request_id: str) -> None:
    """Set request ID in context."""
    request_id_var.set(request_id)
