"""Exercise definition, logged exercise and set schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from liftlog.core.enums import ExerciseType, ImportMode

DATE_STR_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ExerciseDefinitionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(default="Other", max_length=100)
    type: ExerciseType = ExerciseType.WEIGHT_REPS
    unit: str = Field(default="kg", max_length=20)
    description: str | None = None


class ExerciseDefinitionCreate(ExerciseDefinitionBase):
    pass


class ExerciseDefinitionRead(ExerciseDefinitionBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID


class ExerciseDefinitionUpdate(BaseModel):
    """Partial edit; only the fields sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    type: ExerciseType | None = None
    unit: str | None = Field(None, max_length=20)
    description: str | None = None


class DefinitionIdsRequest(BaseModel):
    ids: list[UUID] = Field(..., min_length=1)


class BulkCategoryRequest(DefinitionIdsRequest):
    category: str = Field(..., min_length=1, max_length=100)


class ExerciseDefinitionImport(ExerciseDefinitionBase):
    """One entry of an exercise set file; every field but description is required."""

    category: str = Field(..., min_length=1, max_length=100)
    type: ExerciseType
    unit: str = Field(..., min_length=1, max_length=20)


class ImportPreview(BaseModel):
    to_add: list[ExerciseDefinitionImport] = []
    existing: list[ExerciseDefinitionImport] = []
    total_new: int = 0
    total_existing: int = 0


class ImportResult(BaseModel):
    mode: ImportMode
    added: int
    kept: int


class UsedExercise(BaseModel):
    """Exercise that has been logged at least once (for the chart picker)."""

    name: str
    type: ExerciseType


# ── Sets ─────────────────────────────────────────────────────────────────

class SetValues(BaseModel):
    """Canonical units: weight kg, distance km, time seconds."""

    weight: float | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)
    time: int | None = Field(None, ge=0)
    note: str | None = Field(None, max_length=500)


class SetRecordCreate(SetValues):
    pass


class SetRecordUpdate(SetValues):
    pass


class SetRecordRead(SetValues):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    timestamp: datetime | None = None


class SetLogResult(BaseModel):
    """Response for a newly stored set: PB flag plus the best set of the day for highlighting."""

    set: SetRecordRead
    is_personal_best: bool
    previous_best: SetRecordRead | None = None
    best_set_id: UUID | None = None
    display: str


# ── Logged exercises ─────────────────────────────────────────────────────

class LoggedExerciseCreate(BaseModel):
    definition_id: UUID
    date: str | None = Field(None, pattern=DATE_STR_PATTERN, description="Defaults to today")


class LoggedExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    definition_id: UUID
    name: str
    type: ExerciseType
    date: str
    created_at: datetime | None = None
    sets: list[SetRecordRead] = []
