"""Authentication decorators for the ISP gateway.

Bearer JWTs (HS256) are checked against ``JWT_SECRET``. The gate only
applies when ``AUTH_REQUIRED`` is enabled; otherwise routes stay public and a
valid token, when sent, is still decoded into ``g.current_user``.
"""

# flake8: noqa: E501

from functools import wraps
from typing import Optional

import jwt
import structlog
from flask import current_app, g, jsonify, request

logger = structlog.get_logger(__name__)


def _bearer_token() -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def _auth_error(code: str, message: str, detailed_message: str, status: int):
    return jsonify({"code": code, "message": message, "detailedMessage": detailed_message}), status


def login_required(f):
    """Decorator to require a valid bearer token when AUTH_REQUIRED is on."""

    @wraps(f)
    async def decorated(*args, **kwargs):
        required = current_app.config.get("AUTH_REQUIRED", False)
        token = _bearer_token()
        g.current_user = None

        if not token:
            if required:
                return _auth_error(
                    "UNAUTHORIZED",
                    "Access token not provided",
                    "A Bearer JWT is required in the Authorization header to access this resource.",
                    401,
                )
            return await f(*args, **kwargs)

        try:
            g.current_user = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            if required:
                return _auth_error(
                    "TOKEN_EXPIRED",
                    "Token expired",
                    "The provided token has expired. Please log in again.",
                    401,
                )
        except jwt.InvalidTokenError as e:
            logger.info("invalid_token", path=request.path, error=str(e))
            if required:
                return _auth_error(
                    "INVALID_TOKEN",
                    "Invalid token",
                    "The provided token is not valid or is malformed.",
                    403,
                )

        return await f(*args, **kwargs)

    return decorated
