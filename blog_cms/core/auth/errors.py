"""
Authentication vs. authorization failures.

The two must stay distinguishable: a 401 tells the client to sign in
again, a 403 tells it the signed-in principal may not do this.
"""

from fastapi import status

from blog_cms.core.errors import AppError


class AuthError(AppError):
    """Common base for auth failures."""


class AuthenticationError(AuthError):
    """No credential, or one that could not be turned into a principal."""

    code = "AUTH_ERROR"
    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated", status_code: int | None = None):
        super().__init__(
            message,
            status_code=status_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AuthError):
    """Principal established but lacks the role, permission or ownership."""

    code = "AUTHORIZATION_ERROR"
    default_status = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Permission denied", status_code: int | None = None):
        super().__init__(message, status_code=status_code)
