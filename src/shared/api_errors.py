"""
Translation of httpx failures into the client's two error kinds.

Every operation of the controller funnels its failures through these helpers,
so the message shown to the user is chosen in one place: the server's
``message`` field when present, otherwise the fallback of the operation.
"""

from typing import Any

import httpx

from services.exceptions import ApplicationError, TransportError


def parse_http_error(e: httpx.HTTPStatusError, fallback: str) -> ApplicationError:
    """
    Build an ApplicationError from a non-success response.

    Args:
        e: The HTTP status error from httpx.
        fallback: Message used when the body carries no usable message.

    Returns:
        ApplicationError with the status code and the chosen message.
    """
    message = extract_message(e.response) or fallback
    return ApplicationError(message, status_code=e.response.status_code)


def parse_request_error(e: httpx.RequestError, message: str) -> TransportError:
    """Build a TransportError with the flow's fixed network message."""
    return TransportError(message, cause=e)


def extract_message(response: httpx.Response) -> str | None:
    """
    Extract a human-readable message from an error response body.

    Looks at ``message`` first (the task API's MessageResponse), then at a
    string ``detail``. Non-JSON bodies and other shapes yield None.
    """
    body = _safe_json(response)
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    detail = body.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    return None


def _safe_json(response: httpx.Response) -> Any:
    """Safely decode a response body."""
    try:
        return response.json()
    except ValueError:
        return None
