"""Personal bests - the all-time best set of every logged exercise."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.v1.deps import get_preferences
from liftlog.db.session import get_db
from liftlog.services import workout_log
from liftlog.services.pr_detection import find_best_set, get_comparison_description
from liftlog.services.preferences import PreferenceManager
from liftlog.services.units import calculate_one_rep_max, format_one_rep_max, format_set_for_display

router = APIRouter()


def _record(definition, best, preferences: PreferenceManager) -> dict:
    units = preferences.units
    one_rm = None
    if best.weight is not None and best.reps is not None:
        one_rm = calculate_one_rep_max(best.weight, best.reps)
    return {
        "definition_id": definition.id,
        "exercise_name": definition.name,
        "type": definition.type.value,
        "rule": get_comparison_description(definition.type),
        "set_id": best.id,
        "weight": best.weight,
        "reps": best.reps,
        "distance": best.distance,
        "time": best.time,
        "display": format_set_for_display(definition.type, best, units.weight_unit, units.distance_unit),
        "estimated_1rm": format_one_rep_max(one_rm, units.weight_unit) if one_rm is not None else None,
    }


@router.get("")
async def list_personal_bests(
    db: AsyncSession = Depends(get_db),
    preferences: PreferenceManager = Depends(get_preferences),
):
    """
    Best set per exercise definition, ranked by that exercise type's rule.
    Definitions with no sets are left out.
    """
    records = []
    for definition in await workout_log.list_definitions(db):
        best = find_best_set(await workout_log.fetch_sets_for_definition(db, definition.id), definition.type)
        if best is not None:
            records.append(_record(definition, best, preferences))
    return {"count": len(records), "records": records}


@router.get("/{definition_id}")
async def get_personal_best(
    definition_id: UUID,
    db: AsyncSession = Depends(get_db),
    preferences: PreferenceManager = Depends(get_preferences),
):
    definition = await workout_log.get_definition(db, definition_id)
    if not definition:
        raise HTTPException(status_code=404, detail="Exercise definition not found")
    best = find_best_set(await workout_log.fetch_sets_for_definition(db, definition.id), definition.type)
    if best is None:
        return {"definition_id": definition.id, "rule": get_comparison_description(definition.type), "record": None}
    return {
        "definition_id": definition.id,
        "rule": get_comparison_description(definition.type),
        "record": _record(definition, best, preferences),
    }
