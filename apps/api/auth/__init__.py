"""Authentication helpers."""

from apps.api.auth.decorators import login_required

__all__ = ["login_required"]
