"""
Admin service for handling admin account operations.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from ..models.admin import Admin, AdminRole
from ..utils.exceptions import DuplicateKeyError

logger = logging.getLogger(__name__)


class AdminService:
    """Service class for admin operations."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the admin service.

        Args:
            db: Database session
        """
        self.db = db

    async def create_admin(
        self,
        name: str,
        email: str,
        password: str,
        role: AdminRole = AdminRole.ADMIN,
    ) -> Admin:
        """
        Create a new admin account.

        Args:
            name: Display name
            email: Login e-mail, stored lower-cased
            password: Plain text password, stored as a bcrypt hash
            role: Role to grant

        Returns:
            The created admin

        Raises:
            DuplicateKeyError: If the e-mail is already registered
        """
        email = email.strip().lower()
        if await self.get_admin_by_email(email):
            raise DuplicateKeyError("An admin with this email already exists", field="email")

        admin = Admin(name=name.strip(), email=email, role=role)
        admin.set_password(password)

        try:
            self.db.add(admin)
            await self.db.commit()
            await self.db.refresh(admin)
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateKeyError("An admin with this email already exists", field="email")

        logger.info(f"Admin account created: {admin.email} ({admin.role.value})")
        return admin

    async def get_admin_by_id(self, admin_id: UUID) -> Optional[Admin]:
        """
        Get an admin by ID.

        Returns:
            The admin if found, None otherwise
        """
        result = await self.db.execute(
            select(Admin).where(Admin.id == admin_id)
        )
        return result.scalar_one_or_none()

    async def get_admin_by_email(self, email: str) -> Optional[Admin]:
        result = await self.db.execute(
            select(Admin).where(Admin.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def authenticate_admin(self, email: str, password: str) -> Optional[Admin]:
        """
        Check an e-mail and password pair.

        Returns:
            The admin if the credentials match, None otherwise. Inactive
            accounts are returned too; callers decide how to refuse them.
        """
        admin = await self.get_admin_by_email(email)
        if not admin:
            return None

        if not admin.verify_password(password):
            return None

        return admin
