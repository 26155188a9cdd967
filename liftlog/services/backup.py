"""SQLite file backups and restores.

Copies go through sqlite3's online backup API, so a backup taken while the app
holds connections is still a consistent snapshot. A file is only accepted for
restore when it is a SQLite database that has every liftlog table; the current
database is copied aside before it is overwritten.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"
# Smallest file that can hold a SQLite header page
MIN_BACKUP_SIZE = 4096
REQUIRED_TABLES = ("exercise_definitions", "exercises", "sets", "preferences")


@dataclass
class BackupResult:
    success: bool
    path: Path | None = None
    file_name: str | None = None
    file_size: int = 0
    error: str | None = None


@dataclass
class RestoreResult:
    success: bool
    safety_backup: Path | None = None
    error: str | None = None


@dataclass
class BackupValidation:
    valid: bool
    error: str | None = None


def backup_file_name(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"workout-backup-{stamp}.db"


def format_file_size(size: int) -> str:
    """1536 -> "1.5 KB"."""
    if size <= 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB")
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


def get_database_size(db_path: Path | None) -> int:
    if db_path is None or not db_path.exists():
        return 0
    return db_path.stat().st_size


def _missing_tables(path: Path) -> list[str]:
    conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    finally:
        conn.close()
    present = {name for (name,) in rows}
    return [table for table in REQUIRED_TABLES if table not in present]


def validate_backup_file(path: Path) -> BackupValidation:
    if not path.exists():
        return BackupValidation(False, "File not found")
    if path.stat().st_size < MIN_BACKUP_SIZE:
        return BackupValidation(False, "File too small to be a valid database")
    with path.open("rb") as f:
        if f.read(len(SQLITE_HEADER)) != SQLITE_HEADER:
            return BackupValidation(False, "Not a SQLite database")
    try:
        missing = _missing_tables(path)
    except sqlite3.DatabaseError as e:
        return BackupValidation(False, f"Unreadable database: {e}")
    if missing:
        return BackupValidation(False, f"Missing tables: {', '.join(missing)}")
    return BackupValidation(True)


def _copy_database(source: Path, target: Path) -> None:
    src = sqlite3.connect(source)
    dst = sqlite3.connect(target)
    try:
        with dst:
            src.backup(dst)
    finally:
        dst.close()
        src.close()


async def create_backup(db_path: Path | None, backup_dir: Path, now: datetime | None = None) -> BackupResult:
    """Snapshot the database into backup_dir after checking it has the expected schema."""
    if db_path is None or not db_path.exists():
        return BackupResult(False, error="Database file not found")
    validation = await asyncio.to_thread(validate_backup_file, db_path)
    if not validation.valid:
        return BackupResult(False, error=f"Database validation failed: {validation.error}")

    file_name = backup_file_name(now)
    target = backup_dir / file_name
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_copy_database, db_path, target)
    except (OSError, sqlite3.Error) as e:
        logger.exception("Backup to %s failed", target)
        return BackupResult(False, error=str(e))

    size = target.stat().st_size
    logger.info("Backed up database to %s (%s)", target, format_file_size(size))
    return BackupResult(True, path=target, file_name=file_name, file_size=size)


async def restore_from_backup(source: Path, db_path: Path | None, backup_dir: Path) -> RestoreResult:
    """
    Replace the database with `source`. The caller must have closed its own
    connections (engine.dispose()) first.
    """
    if db_path is None:
        return RestoreResult(False, error="Cannot restore into an in-memory database")
    validation = await asyncio.to_thread(validate_backup_file, source)
    if not validation.valid:
        return RestoreResult(False, error=validation.error)

    safety = None
    try:
        if db_path.exists():
            backup_dir.mkdir(parents=True, exist_ok=True)
            safety = backup_dir / f"pre-restore-{backup_file_name()}"
            await asyncio.to_thread(_copy_database, db_path, safety)
        await asyncio.to_thread(_copy_database, source, db_path)
    except (OSError, sqlite3.Error) as e:
        logger.exception("Restore from %s failed", source)
        return RestoreResult(False, safety_backup=safety, error=str(e))

    logger.info("Restored database from %s (previous copy: %s)", source, safety)
    return RestoreResult(True, safety_backup=safety)
