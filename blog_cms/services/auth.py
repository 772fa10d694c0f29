"""
Authentication service.

Issues and verifies the HS256 bearer tokens that carry a principal's id.
Tokens minted by an external identity provider sharing AUTH_SECRET_KEY are
accepted the same way, as long as they carry `sub` and `email` claims.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.auth.errors import AuthenticationError
from blog_cms.core.config import settings
from blog_cms.models.user import User

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    """Verified token contents."""
    sub: str
    email: str | None = None
    name: str | None = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(
    user_id: str,
    email: str | None = None,
    name: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Create a signed access token."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.auth.access_token_expire_minutes
    )
    payload = {
        "sub": user_id,
        "exp": expire,
        "type": "access",
    }
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name

    return jwt.encode(
        payload,
        settings.auth.secret_key,
        algorithm=settings.auth.algorithm,
    )


def decode_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry.

    Raises:
        AuthenticationError: token invalid, expired, or missing `sub`
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth.secret_key,
            algorithms=[settings.auth.algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token verification failed: {e}")

    if payload.get("type", "access") != "access":
        raise AuthenticationError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token")

    return TokenClaims(sub=str(user_id), email=payload.get("email"), name=payload.get("name"))


class AuthService:
    """Password login for accounts that have a local password."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def login(self, email: str, password: str) -> str | None:
        """Authenticate user and return an access token."""
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not user.password_hash or not verify_password(password, user.password_hash):
            logger.info("Login failed", email=email)
            return None

        if not user.active:
            logger.info("Login refused for deactivated account", user_id=user.id)
            return None

        user.last_login_at = datetime.now(timezone.utc)
        await self.db.flush()

        logger.info("Login succeeded", user_id=user.id)
        return create_access_token(user.id, email=user.email, name=user.display_name)
