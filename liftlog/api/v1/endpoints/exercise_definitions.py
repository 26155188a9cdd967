"""Exercise definition endpoints: the catalogue users pick from when logging."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.enums import ImportMode
from liftlog.core.exercise_types import EXERCISE_TYPE_LABELS, get_exercise_type_fields
from liftlog.db.session import get_db
from liftlog.schemas.exercise import (
    BulkCategoryRequest,
    DefinitionIdsRequest,
    ExerciseDefinitionCreate,
    ExerciseDefinitionImport,
    ExerciseDefinitionRead,
    ExerciseDefinitionUpdate,
    ImportPreview,
    ImportResult,
    UsedExercise,
)
from liftlog.services import definition_import, workout_log
from liftlog.services.pr_detection import get_comparison_description

router = APIRouter()


@router.get("", response_model=list[ExerciseDefinitionRead])
async def list_definitions(db: AsyncSession = Depends(get_db)):
    """All definitions, by name."""
    return await workout_log.list_definitions(db)


@router.get("/used", response_model=list[UsedExercise])
async def list_used_definitions(db: AsyncSession = Depends(get_db)):
    """Definitions logged at least once (chart picker, 'show only used' filter)."""
    return await workout_log.fetch_used_exercises(db)


@router.get("/types")
async def list_exercise_types():
    """Every exercise type with the fields it records and how its sets are ranked."""
    return [
        {
            "type": ex_type.value,
            "label": label,
            "fields": list(get_exercise_type_fields(ex_type).fields),
            "comparison": get_comparison_description(ex_type),
        }
        for ex_type, label in EXERCISE_TYPE_LABELS.items()
    ]


@router.post("", response_model=ExerciseDefinitionRead, status_code=201)
async def create_definition(
    payload: ExerciseDefinitionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a definition. Names are unique."""
    if await workout_log.get_definition_by_name(db, payload.name) is not None:
        raise HTTPException(status_code=409, detail="Exercise definition already exists")
    return await workout_log.create_definition(db, payload)


@router.post("/import/preview", response_model=ImportPreview)
async def preview_import(
    payload: list[ExerciseDefinitionImport],
    db: AsyncSession = Depends(get_db),
):
    """Which entries of an exercise set are new and which are already present (by name, any case)."""
    if not payload:
        raise HTTPException(status_code=422, detail="Exercise set is empty")
    return await definition_import.preview_import(db, payload)


@router.post("/import", response_model=ImportResult)
async def import_definitions(
    payload: list[ExerciseDefinitionImport],
    mode: ImportMode = ImportMode.MERGE,
    db: AsyncSession = Depends(get_db),
):
    """
    Import an exercise set. merge: add new names only.
    replace: delete every definition, logged exercise and set, then add the set.
    """
    if not payload:
        raise HTTPException(status_code=422, detail="Exercise set is empty")
    return await definition_import.apply_import(db, payload, mode)


@router.post("/bulk-category")
async def bulk_set_category(
    payload: BulkCategoryRequest,
    db: AsyncSession = Depends(get_db),
):
    updated = await workout_log.set_definitions_category(db, payload.ids, payload.category)
    return {"updated": updated}


@router.post("/bulk-delete")
async def bulk_delete(
    payload: DefinitionIdsRequest,
    db: AsyncSession = Depends(get_db),
):
    """Delete several definitions with everything logged against them."""
    deleted = await workout_log.delete_definitions(db, payload.ids)
    return {"deleted": deleted}


@router.get("/{definition_id}", response_model=ExerciseDefinitionRead)
async def get_definition(
    definition_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    definition = await workout_log.get_definition(db, definition_id)
    if not definition:
        raise HTTPException(status_code=404, detail="Exercise definition not found")
    return definition


@router.delete("/{definition_id}", status_code=204)
async def delete_definition(
    definition_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a definition along with everything logged against it."""
    definition = await workout_log.get_definition(db, definition_id)
    if not definition:
        raise HTTPException(status_code=404, detail="Exercise definition not found")
    await db.delete(definition)
    return None


@router.patch("/{definition_id}", response_model=ExerciseDefinitionRead)
async def update_definition(
    definition_id: UUID,
    payload: ExerciseDefinitionUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit name, category, type, unit or description. Names stay unique regardless of case."""
    definition = await workout_log.get_definition(db, definition_id)
    if not definition:
        raise HTTPException(status_code=404, detail="Exercise definition not found")
    if payload.name is not None and await workout_log.get_definition_by_name(
        db, payload.name, exclude_id=definition_id
    ):
        raise HTTPException(status_code=409, detail="Exercise definition already exists")
    return await workout_log.update_definition(db, definition, payload)
