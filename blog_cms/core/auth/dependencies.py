"""
FastAPI dependencies for authentication and authorization.

Usage:
    from blog_cms.core.auth.dependencies import CurrentPrincipal, AdminPrincipal, Authorize, with_auth

    @router.get("/me")
    async def handler(principal: CurrentPrincipal):
        ...

    @router.get("/users")
    async def handler(principal: AdminPrincipal):
        ...

    @router.post("/categories")
    async def handler(principal: Principal = Depends(with_auth(AccessRule.build(
        allowed_roles=[Role.ADMIN, Role.EDITOR],
        required_permissions=["categories.create"],
    )))):
        ...
"""

from functools import lru_cache
from typing import Annotated, Any, Callable

import structlog
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.api.dependencies.database import get_db
from blog_cms.core.config import settings
from blog_cms.models.user import User
from blog_cms.services.auth import decode_token
from blog_cms.services.user import UserService

from .errors import AuthenticationError
from .interfaces import AccessRule, PolicyEngine, Principal
from .permissions import Role
from .registry import AuthRegistry
from .service import AuthorizationService

# Import to register default implementations
from . import policy  # noqa: F401

logger = structlog.get_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# ============================================================
# COMPONENT FACTORIES
# ============================================================

@lru_cache
def get_policy_engine() -> PolicyEngine:
    """
    Get configured policy engine.

    Reads from AUTH_POLICY_ENGINE. Default: "stored".
    """
    return AuthRegistry.get_policy_engine(settings.auth.policy_engine)


# ============================================================
# PRINCIPAL
# ============================================================

def principal_from_user(user: User) -> Principal:
    return Principal(
        id=user.id,
        email=user.email,
        role=user.role,
        permissions=tuple(user.permissions or ()),
        display_name=user.display_name,
        active=user.active,
    )


async def verify_auth_token(token: str | None, db: AsyncSession) -> Principal:
    """
    Turn a bearer token into a Principal.

    Raises:
        AuthenticationError: missing/invalid token, unknown user, or
            deactivated account
    """
    if not token:
        raise AuthenticationError("Missing or invalid authorization header")

    claims = decode_token(token)

    user = await UserService(db).get_by_id(claims.sub)
    if not user:
        raise AuthenticationError("User not found")

    if not user.active:
        raise AuthenticationError("Account deactivated")

    return principal_from_user(user)


async def get_current_principal(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Get current authenticated principal from the bearer token.

    Raises:
        AuthenticationError 401: If not authenticated
    """
    try:
        principal = await verify_auth_token(token, db)
    except AuthenticationError as e:
        logger.info("Authentication failed", reason=e.message)
        raise

    request.state.principal_id = principal.id
    return principal


# ============================================================
# AUTHORIZATION SERVICE DEPENDENCY
# ============================================================

async def get_authorization_service(
    principal: Principal = Depends(get_current_principal),
) -> AuthorizationService:
    """
    Get authorization service for current principal.

    Usage:
        async def handler(auth: Authorize):
            auth.require("posts.delete")
    """
    return AuthorizationService(principal, get_policy_engine())


# ============================================================
# ROLE-GATED ACCESS RULES
# ============================================================

async def _resource_owner_id(request: Request, owner_field: str | None) -> str | None:
    """Owner from a path parameter, the JSON body, or the last path segment."""
    if not owner_field:
        return None

    owner_id = request.path_params.get(owner_field)
    if owner_id:
        return str(owner_id)

    body: Any = {}
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = {}
    if isinstance(body, dict) and body.get(owner_field):
        return str(body[owner_field])

    segment = request.url.path.rstrip("/").rsplit("/", 1)[-1]
    return segment or None


def with_auth(rule: AccessRule = AccessRule()) -> Callable:
    """
    Dependency factory enforcing an AccessRule for a route.

    Authentication failures surface as 401, rule failures as 403.
    """

    async def dependency(
        request: Request,
        auth: AuthorizationService = Depends(get_authorization_service),
    ) -> Principal:
        owner_id = None
        if rule.allow_owner:
            owner_id = await _resource_owner_id(request, rule.owner_field)

        auth.check_rule(rule, resource_owner_id=owner_id)
        return auth.principal

    return dependency


ADMIN_ONLY = AccessRule.build(allowed_roles=[Role.ADMIN])
EDITORS = AccessRule.build(allowed_roles=[Role.ADMIN, Role.EDITOR])
AUTHORS = AccessRule.build(allowed_roles=[Role.ADMIN, Role.EDITOR, Role.AUTHOR])


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

# Authenticated principal (required)
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]

# Role-gated principals
AdminPrincipal = Annotated[Principal, Depends(with_auth(ADMIN_ONLY))]
EditorPrincipal = Annotated[Principal, Depends(with_auth(EDITORS))]
AuthorPrincipal = Annotated[Principal, Depends(with_auth(AUTHORS))]

# Authorization service
Authorize = Annotated[AuthorizationService, Depends(get_authorization_service)]
