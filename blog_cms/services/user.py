"""
User service.

Keeps the role and the stored permission snapshot in step: whenever a role
is assigned, the permissions are re-read from the catalog.
"""

import re
from datetime import datetime, timezone
from typing import Any, Iterable

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from blog_cms.core.auth.permissions import Role, permissions_for
from blog_cms.core.config import settings
from blog_cms.core.errors import ConflictError, NotFoundError, ValidationFailed
from blog_cms.models.user import User
from blog_cms.services.auth import hash_password

logger = structlog.get_logger()

# Fields a user may change on their own profile
PROFILE_FIELDS = ("display_name", "bio", "expertise", "social", "avatar_url")
# Additional fields only an admin may change
ADMIN_FIELDS = ("active",)


def is_admin_email(email: str) -> bool:
    """Whether the email is listed in AUTH_ADMIN_EMAILS."""
    return email.strip() in settings.auth.admin_email_list


def default_display_name(email: str) -> str:
    """"jane.doe@example.com" -> "jane doe"."""
    return re.sub(r"[._]", " ", email.split("@")[0])


class UserService:
    """User management service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> User | None:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, user_id: str) -> User:
        user = await self.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        role: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> tuple[list[User], int]:
        """List users, newest first, with filters and pagination."""
        stmt = select(User)

        if role and Role.parse(role):
            stmt = stmt.where(User.role == role)
        if status == "active":
            stmt = stmt.where(User.active.is_(True))
        elif status == "inactive":
            stmt = stmt.where(User.active.is_(False))
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                func.lower(User.email).like(pattern) |
                func.lower(User.display_name).like(pattern)
            )

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = await self.db.scalar(count_stmt) or 0

        stmt = (
            stmt.order_by(User.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def create_user(
        self,
        email: str,
        display_name: str | None = None,
        role: Role | str = Role.AUTHOR,
        password: str | None = None,
        bio: str = "",
        expertise: Iterable[str] | None = None,
        user_id: str | None = None,
    ) -> User:
        """
        Create a user with the catalog permissions of its role.

        Raises:
            ConflictError: email already registered
            ValidationFailed: unknown role or password too short
        """
        parsed_role = Role.parse(role)
        if parsed_role is None:
            raise ValidationFailed("Invalid role. Must be admin, editor, or author")

        if password is not None and len(password) < settings.auth.password_min_length:
            raise ValidationFailed(
                f"Password must be at least {settings.auth.password_min_length} characters long"
            )

        if await self.get_by_email(email):
            raise ConflictError("Email address is already in use")

        user = User(
            email=email,
            display_name=display_name or default_display_name(email),
            role=parsed_role.value,
            permissions=list(permissions_for(parsed_role)),
            password_hash=hash_password(password) if password else None,
            active=True,
            bio=bio,
            expertise=list(expertise or []),
            social={},
        )
        if user_id:
            user.id = user_id

        self.db.add(user)
        await self.db.flush()

        logger.info("User created", user_id=user.id, role=user.role)
        return user

    async def ensure_user(
        self,
        uid: str,
        email: str,
        display_name: str | None = None,
    ) -> User:
        """
        Make sure an externally authenticated identity has a user record.

        Existing records only get their last login refreshed. New records get
        the admin role if the email is in AUTH_ADMIN_EMAILS, author otherwise.
        """
        user = await self.get_by_id(uid)
        if user:
            user.last_login_at = datetime.now(timezone.utc)
            await self.db.flush()
            return user

        role = Role.ADMIN if is_admin_email(email) else Role.AUTHOR
        user = await self.create_user(
            email=email,
            display_name=display_name,
            role=role,
            user_id=uid,
        )
        user.last_login_at = datetime.now(timezone.utc)
        await self.db.flush()

        logger.info("Created user record for external identity", user_id=uid, role=role.value)
        return user

    async def update_user_role(self, user_id: str, role: Role | str) -> User:
        """Assign a role and refresh the permission snapshot."""
        parsed_role = Role.parse(role)
        if parsed_role is None:
            raise ValidationFailed("Invalid role. Must be admin, editor, or author")

        user = await self.get_or_404(user_id)
        user.role = parsed_role.value
        user.permissions = list(permissions_for(parsed_role))
        await self.db.flush()

        logger.info("User role updated", user_id=user.id, role=user.role)
        return user

    async def update(self, user_id: str, data: dict[str, Any], as_admin: bool = False) -> User:
        """
        Update profile fields.

        Non-admins may only touch PROFILE_FIELDS; admins may also change
        `active` and `role`.
        """
        user = await self.get_or_404(user_id)

        allowed = PROFILE_FIELDS + ADMIN_FIELDS if as_admin else PROFILE_FIELDS
        for field, value in data.items():
            if field in allowed:
                setattr(user, field, value)

        if as_admin and data.get("role") is not None:
            await self.update_user_role(user_id, data["role"])

        await self.db.flush()
        return user

    async def set_active(self, user_id: str, active: bool) -> User:
        user = await self.get_or_404(user_id)
        user.active = active
        await self.db.flush()

        logger.info("User activation changed", user_id=user.id, active=active)
        return user

    async def deactivate_user(self, user_id: str) -> User:
        return await self.set_active(user_id, False)

    async def reactivate_user(self, user_id: str) -> User:
        return await self.set_active(user_id, True)

    async def delete(self, user_id: str) -> None:
        user = await self.get_or_404(user_id)
        await self.db.delete(user)
        await self.db.flush()

        logger.info("User deleted", user_id=user_id)

    async def bootstrap_admin_users(self, emails: Iterable[str] | None = None) -> list[User]:
        """
        Create or promote the configured admin accounts.

        Failures for one address are logged and do not stop the others.
        """
        emails = settings.auth.admin_email_list if emails is None else emails
        admins = []

        for email in emails:
            email = email.strip()
            if not email:
                continue

            try:
                user = await self.get_by_email(email)
                if user is None:
                    user = await self.create_user(email=email, role=Role.ADMIN)
                    logger.info("Created admin user", email=email)
                elif user.role != Role.ADMIN.value:
                    await self.update_user_role(user.id, Role.ADMIN)
                    logger.info("Promoted user to admin", email=email)
                admins.append(user)
            except ConflictError as e:
                logger.error("Failed to bootstrap admin user", email=email, error=e.message)

        return admins
