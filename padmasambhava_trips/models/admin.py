"""
Admin model for console authentication.
"""

import enum

from sqlalchemy import Boolean, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import TimestampedBase
from ..utils.auth import get_password_hash, verify_password


class AdminRole(str, enum.Enum):
    """Roles an admin account can hold."""
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class Admin(TimestampedBase):
    """Admin account allowed to use the booking console."""

    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[AdminRole] = mapped_column(
        Enum(
            AdminRole,
            name="admin_role",
            native_enum=False,
            length=16,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        default=AdminRole.ADMIN,
        nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_admins_email"),
    )

    def set_password(self, password: str) -> None:
        """Hash and set the admin's password."""
        self.password_hash = get_password_hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify the admin's password against the stored hash."""
        return verify_password(password, self.password_hash)

    def __repr__(self) -> str:
        """String representation of the admin."""
        return f"<Admin(id={self.id}, email='{self.email}', role={self.role.value})>"
