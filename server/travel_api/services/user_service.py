"""User service for accounts, credentials and roles."""

import logging
from typing import Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError
from ..core.security import hash_password, verify_password
from ..models.user import User, UserRole
from ..schemas.user import SignupRequest, UserQuery

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        return await self.db.get(User, user_id, populate_existing=True)

    async def get_user_by_id_or_raise(self, user_id: str) -> User:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError(resource_type="user", resource_id=user_id)
        return user

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, request: SignupRequest) -> User:
        """
        Register a password account.

        Raises:
            ConflictError: If the email is already registered
        """
        email = str(request.email).lower()
        if await self.get_user_by_email(email):
            logger.warning("Signup failed - email already registered", extra={"email": email})
            raise ConflictError(detail="An account with this email already exists")

        user = User(
            email=email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            role=UserRole.USER.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(detail="An account with this email already exists")
        await self.db.refresh(user)

        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check a password login.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login failed", extra={"email": email})
            raise AuthenticationError(detail="Invalid email or password")
        return user

    async def upsert_oauth_user(
        self,
        subject: str,
        email: str,
        first_name: Optional[str],
        last_name: Optional[str],
        picture: Optional[str],
        email_verified: bool,
    ) -> User:
        """
        Create or refresh the account for a Google identity.

        OAuth accounts use the id ``google:<sub>``. An existing password
        account with the same email is reused so one person keeps one account.
        """
        user_id = f"google:{subject}"
        user = await self.get_user_by_id(user_id) or await self.get_user_by_email(email)

        if user is None:
            user = User(id=user_id, email=email.lower(), role=UserRole.USER.value)
            self.db.add(user)
            logger.info("Creating OAuth user", extra={"user_id": user_id})

        user.first_name = first_name or user.first_name
        user.last_name = last_name or user.last_name
        user.profile_image_url = picture or user.profile_image_url
        user.is_email_verified = user.is_email_verified or email_verified

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def list_users(self, query: UserQuery) -> list[User]:
        conditions = []
        if query.role is not None:
            conditions.append(User.role == query.role.value)
        if query.search:
            pattern = f"%{query.search}%"
            conditions.append(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )

        stmt = select(User)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(User.created_at.desc(), User.email).offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def update_role(self, user_id: str, role: UserRole, actor: User) -> User:
        user = await self.get_user_by_id_or_raise(user_id)
        previous = user.role
        user.role = role.value
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(
            "User role changed",
            extra={
                "user_id": user_id,
                "previous_role": previous,
                "new_role": role.value,
                "actor": actor.id
            }
        )
        return user
