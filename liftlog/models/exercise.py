"""Exercise models - definitions (what can be logged) and logged exercises (one per definition per day)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.enums import ExerciseType
from liftlog.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExerciseDefinition(Base):
    """A named exercise with its category and measurement type."""

    __tablename__ = "exercise_definitions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Other")
    type: Mapped[ExerciseType] = mapped_column(
        Enum(
            ExerciseType,
            native_enum=False,
            length=32,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    unit: Mapped[str] = mapped_column(String(20), default="kg")
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    logged_exercises: Mapped[list["LoggedExercise"]] = relationship(
        "LoggedExercise", back_populates="definition", cascade="all, delete-orphan", passive_deletes=True
    )


class LoggedExercise(Base):
    """An exercise performed on a calendar date (YYYY-MM-DD, local), holding its sets."""

    __tablename__ = "exercises"
    __table_args__ = (Index("ix_exercises_date", "date"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    definition_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercise_definitions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    definition: Mapped["ExerciseDefinition"] = relationship(
        "ExerciseDefinition", back_populates="logged_exercises"
    )
    sets: Mapped[list["SetRecord"]] = relationship(
        "SetRecord",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="SetRecord.timestamp",
        passive_deletes=True,
    )

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def type(self) -> ExerciseType:
        return self.definition.type
