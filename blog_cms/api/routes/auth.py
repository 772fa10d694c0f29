"""
Authentication routes.
"""

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from blog_cms.api.dependencies.services import Users, get_auth_service
from blog_cms.core.auth.dependencies import Authorize, CurrentPrincipal
from blog_cms.core.auth.errors import AuthenticationError
from blog_cms.core.errors import ValidationFailed
from blog_cms.schemas.auth import EnsureUserRequest, EnsureUserResponse, TokenResponse
from blog_cms.schemas.user import CurrentUserResponse, UserResponse
from blog_cms.services.auth import AuthService, decode_token

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Login with email and password."""
    token = await auth_service.login(
        email=form_data.username,
        password=form_data.password,
    )
    if not token:
        raise AuthenticationError("Invalid credentials")
    return TokenResponse(access_token=token)


@router.post("/ensure-user", response_model=EnsureUserResponse)
async def ensure_user(data: EnsureUserRequest, users: Users):
    """
    Create the user record for a freshly signed-in identity.

    The token is verified here rather than through the usual dependency
    because the record it would resolve to may not exist yet.
    """
    claims = decode_token(data.id_token)
    if not claims.email:
        raise ValidationFailed("Token has no email claim")

    user = await users.ensure_user(claims.sub, claims.email, display_name=claims.name)
    return EnsureUserResponse(user=UserResponse.model_validate(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(principal: CurrentPrincipal, auth: Authorize, users: Users):
    """Current user and the permissions the policy engine grants them."""
    user = await users.get_or_404(principal.id)
    return CurrentUserResponse(
        user=UserResponse.model_validate(user),
        effective_permissions=sorted(auth.get_permissions()),
    )
