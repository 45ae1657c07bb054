"""User (credential store) model."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from timesheet_tracker.models.timesheet import TimesheetEntry


class Role(str, Enum):
    """User roles."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class User(Base, TimestampMixin):
    """Registered user.

    Employees may point at a manager; managers never have one, so the
    reporting tree is exactly two levels deep.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    manager_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('employee', 'manager')",
            name="users_role_check",
        ),
    )

    # Relationships
    manager: Mapped[User | None] = relationship(
        remote_side="User.id",
        back_populates="reports",
    )
    reports: Mapped[list[User]] = relationship(back_populates="manager")
    entries: Mapped[list[TimesheetEntry]] = relationship(back_populates="owner")

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER.value
