"""Dated SQLite snapshots taken before schema migrations."""
from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import date, timedelta
from pathlib import Path
from typing import Iterator, Optional, Tuple

from core.log import get_logger


log = get_logger("backup")


def backup_name(db_file: Path, day: date) -> str:
    return f"{db_file.stem}_{day.isoformat()}{db_file.suffix}"


def _dated_backups(backups: Path, db_file: Path) -> Iterator[Tuple[date, Path]]:
    prefix = f"{db_file.stem}_"
    for candidate in backups.glob(f"{prefix}*{db_file.suffix}"):
        try:
            taken = date.fromisoformat(candidate.stem[len(prefix):])
        except ValueError:
            continue
        yield taken, candidate


def snapshot(db_file: Path, destination: Path) -> None:
    """Copy ``db_file`` through SQLite's online backup API."""

    with closing(sqlite3.connect(str(db_file))) as src, closing(sqlite3.connect(str(destination))) as dst:
        src.backup(dst)


def rotate(backups: Path, db_file: Path, keep_days: int, *, today: Optional[date] = None) -> int:
    """Delete snapshots older than the last ``keep_days`` days; returns how many went."""

    if keep_days <= 0:
        return 0
    oldest_kept = (today or date.today()) - timedelta(days=keep_days - 1)
    removed = 0
    for taken, candidate in _dated_backups(backups, db_file):
        if taken >= oldest_kept:
            continue
        try:
            candidate.unlink()
        except OSError as exc:
            log.warning("Could not remove old backup %s: %s", candidate, exc)
        else:
            removed += 1
    return removed


def ensure_daily_backup(
    db_path: str | Path,
    backup_dir: str | Path,
    *,
    keep_days: int = 7,
    today: Optional[date] = None,
) -> Optional[Path]:
    """Snapshot ``db_path`` once per day and prune old copies.

    Returns the new snapshot path, or ``None`` when the database does not exist
    yet or today's snapshot was already taken.
    """

    source = Path(db_path)
    if not source.exists():
        return None

    day = today or date.today()
    target_dir = Path(backup_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / backup_name(source, day)

    created = None
    if not target.exists():
        snapshot(source, target)
        created = target
    rotate(target_dir, source, keep_days, today=day)
    return created


__all__ = ["backup_name", "ensure_daily_backup", "rotate", "snapshot"]
