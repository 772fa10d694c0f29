"""
Authentication schemas.
"""

from pydantic import BaseModel

from .user import UserResponse


class TokenResponse(BaseModel):
    """Access token response."""
    access_token: str
    token_type: str = "bearer"


class EnsureUserRequest(BaseModel):
    """Token issued by the identity provider for the signed-in user."""
    id_token: str


class EnsureUserResponse(BaseModel):
    success: bool = True
    user: UserResponse
