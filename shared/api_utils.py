"""API utilities for the ISP gateway."""

# flake8: noqa: E501


from typing import Any, Dict, Optional, Tuple

from flask import request


def unwrap_form_envelope(body: Any) -> Dict[str, Any]:
    """
    Unwrap a UI form envelope.

    Form submissions may arrive as ``{"FORMZ10": {...}}``: when a top-level
    key starting with ``FORM`` holds an object, that object is the payload.
    Otherwise the body itself is. Non-object bodies become ``{}``.

    Args:
        body: Decoded JSON body

    Returns:
        Payload dict
    """
    if not isinstance(body, dict):
        return {}
    for key, value in body.items():
        if str(key).startswith("FORM"):
            if isinstance(value, dict):
                return value
            break
    return body


def get_request_payload() -> Dict[str, Any]:
    """
    Read the JSON body of the current request, unwrapped.

    Returns:
        Payload dict; empty when the body is missing or not JSON
    """
    return unwrap_form_envelope(request.get_json(silent=True))


def make_error_response(
    message: str, status_code: int = 400, code: Optional[str] = None, detailed_message: Optional[str] = None
) -> Tuple[Dict, int]:
    """
    Create a standardized error response.

    Args:
        message: Error message
        status_code: HTTP status code
        code: Machine-readable error code
        detailed_message: Extra diagnostic text (defaults to message)

    Returns:
        Tuple of (response dict, status code)
    """
    from apps.api.models.pydantic.common import ErrorResponse

    response = ErrorResponse(code=code or "ERROR", message=message, detailed_message=detailed_message)
    return response.to_body(), status_code
