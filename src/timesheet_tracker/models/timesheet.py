"""Timesheet entry (entry store) model."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_tracker.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from timesheet_tracker.models.user import User


class TimesheetEntry(Base, TimestampMixin):
    """One logged work interval."""

    __tablename__ = "timesheet"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project: Mapped[str] = mapped_column(String(255), nullable=False)
    task_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="timesheet_status_check",
        ),
    )

    # Relationships
    owner: Mapped[User] = relationship(back_populates="entries")

    @property
    def duration_hours(self) -> float:
        """Worked hours between start and end, rounded to 2 decimals."""
        start = datetime.combine(self.entry_date, self.start_time)
        end = datetime.combine(self.entry_date, self.end_time)
        return round((end - start).total_seconds() / 3600, 2)
