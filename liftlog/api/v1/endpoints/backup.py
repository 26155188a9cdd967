"""Database backup and restore (whole SQLite file)."""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from liftlog.api.v1.deps import get_calendar_service, get_preferences
from liftlog.core.config import get_settings
from liftlog.db.session import engine
from liftlog.services.backup import (
    backup_file_name,
    create_backup,
    format_file_size,
    get_database_size,
    restore_from_backup,
)
from liftlog.services.calendar_data import CalendarDataService
from liftlog.services.preferences import PreferenceManager

router = APIRouter()


@router.get("")
async def backup_info():
    settings = get_settings()
    size = get_database_size(settings.database_file)
    return {"database_path": settings.database_path, "size": size, "size_display": format_file_size(size)}


@router.post("")
async def make_backup():
    """Write a backup into the backup directory."""
    settings = get_settings()
    result = await create_backup(settings.database_file, Path(settings.backup_dir))
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return {
        "file_name": result.file_name,
        "path": str(result.path),
        "size": result.file_size,
        "size_display": format_file_size(result.file_size),
    }


@router.get("/download")
async def download_backup():
    """Take a backup and send it as a file."""
    settings = get_settings()
    result = await create_backup(settings.database_file, Path(settings.backup_dir))
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)
    return Response(
        content=result.path.read_bytes(),
        media_type="application/x-sqlite3",
        headers={"Content-Disposition": f"attachment; filename={result.file_name}"},
    )


@router.post("/restore")
async def restore_backup(
    request: Request,
    preferences: PreferenceManager = Depends(get_preferences),
    calendar: CalendarDataService = Depends(get_calendar_service),
):
    """
    Replace the database with the request body (a backup file).
    The current database is kept in the backup directory as pre-restore-*.db.
    """
    settings = get_settings()
    backup_dir = Path(settings.backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    upload = backup_dir / f"upload-{backup_file_name()}"
    upload.write_bytes(await request.body())
    try:
        await preferences.flush()
        await engine.dispose()
        result = await restore_from_backup(upload, settings.database_file, backup_dir)
    finally:
        upload.unlink(missing_ok=True)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    await preferences.load()
    await calendar.refresh()
    return {
        "status": "restored",
        "safety_backup": str(result.safety_backup) if result.safety_backup else None,
    }
