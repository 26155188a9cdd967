"""CSV export of all logged sets."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.db.session import get_db
from liftlog.services.export import export_csv

router = APIRouter()


@router.get("/csv")
async def export_workouts_csv(db: AsyncSession = Depends(get_db)):
    """Download every set as CSV (newest day first)."""
    result = await export_csv(db)
    if not result.success:
        raise HTTPException(status_code=404, detail=result.error)
    return Response(
        content=result.content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={result.file_name}",
            "X-Record-Count": str(result.record_count),
        },
    )
