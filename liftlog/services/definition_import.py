"""Bulk import of exercise definitions from an exercise set (a JSON list of definitions).

Names are matched case-insensitively after trimming, against the database and
within the imported list itself. Merge adds only unseen names; replace clears
definitions, logged exercises and sets first and then adds the whole list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.enums import ImportMode
from liftlog.models.exercise import ExerciseDefinition, LoggedExercise
from liftlog.models.set_record import SetRecord
from liftlog.schemas.exercise import ExerciseDefinitionImport, ImportPreview, ImportResult

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return name.strip().lower()


def _dedupe(items: Sequence[ExerciseDefinitionImport]) -> list[ExerciseDefinitionImport]:
    seen: set[str] = set()
    unique = []
    for item in items:
        key = _normalize(item.name)
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique


def diff_definitions(
    items: Sequence[ExerciseDefinitionImport],
    existing_names: Sequence[str],
) -> ImportPreview:
    """Split an import into new names and names already present. Later repeats in the list are dropped."""
    known = {_normalize(name) for name in existing_names}
    to_add: list[ExerciseDefinitionImport] = []
    existing: list[ExerciseDefinitionImport] = []
    for item in items:
        key = _normalize(item.name)
        if key in known:
            existing.append(item)
        else:
            to_add.append(item)
            known.add(key)
    return ImportPreview(
        to_add=to_add,
        existing=existing,
        total_new=len(to_add),
        total_existing=len(existing),
    )


async def preview_import(db: AsyncSession, items: Sequence[ExerciseDefinitionImport]) -> ImportPreview:
    result = await db.execute(select(ExerciseDefinition.name))
    return diff_definitions(items, list(result.scalars().all()))


def _definition(item: ExerciseDefinitionImport) -> ExerciseDefinition:
    return ExerciseDefinition(
        name=item.name.strip(),
        category=item.category.strip(),
        type=item.type,
        unit=item.unit,
        description=item.description,
    )


async def apply_import(
    db: AsyncSession,
    items: Sequence[ExerciseDefinitionImport],
    mode: ImportMode,
) -> ImportResult:
    if mode is ImportMode.REPLACE:
        # Children first so the wipe does not depend on cascade settings
        await db.execute(delete(SetRecord))
        await db.execute(delete(LoggedExercise))
        await db.execute(delete(ExerciseDefinition))
        db.expunge_all()
        to_add = _dedupe(items)
        kept = 0
    else:
        preview = await preview_import(db, items)
        to_add = preview.to_add
        kept = preview.total_existing

    db.add_all(_definition(item) for item in to_add)
    await db.flush()
    logger.info("Imported exercise definitions (%s): %d added, %d kept", mode.value, len(to_add), kept)
    return ImportResult(mode=mode, added=len(to_add), kept=kept)
