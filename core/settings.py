"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


DATA_DIR_ENV = "STUDY_DASHBOARD_DATA_DIR"


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "StudyDashboard"


DATA_DIR = get_default_data_dir(APP_NAME)
BACKUP_DIR = DATA_DIR / "backups"
LOG_DIR = DATA_DIR / "logs"

DB_PATH = DATA_DIR / "dashboard.db"


def ensure_data_dirs() -> None:
    for _dir in (DATA_DIR, BACKUP_DIR, LOG_DIR):
        _dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class LogSettings:
    path: Path = LOG_DIR / "dashboard.log"
    level: str = os.environ.get("STUDY_DASHBOARD_LOG_LEVEL", "INFO")
    max_bytes: int = 1_000_000
    backup_count: int = 3
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


LOGGING = LogSettings()


@dataclass(frozen=True)
class DashboardSettings:
    default_course_color: str = "#1f2937"
    default_course_id: str = "custom"
    default_course_name: str = "Custom"
    unknown_course_name: str = "Unknown Course"
    submitted_due_text: str = "Submitted"
    upcoming_window_days: int = 14
    recent_window_days: int = 7
    recent_limit: int = 10
    contrast_threshold: float = 0.179
    demo_mode: bool = os.environ.get("STUDY_DASHBOARD_DEMO", "") not in ("", "0", "false")


DASHBOARD = DashboardSettings()


@dataclass(frozen=True)
class ClassroomSettings:
    course_states: tuple[str, ...] = ("ACTIVE", "ARCHIVED", "PROVISIONED")
    page_size: int = 100
    scopes: tuple[str, ...] = (
        "openid",
        "email",
        "profile",
        "https://www.googleapis.com/auth/classroom.courses.readonly",
        "https://www.googleapis.com/auth/classroom.coursework.me.readonly",
        "https://www.googleapis.com/auth/classroom.student-submissions.me.readonly",
    )


CLASSROOM = ClassroomSettings()


@dataclass(frozen=True)
class BackupSettings:
    enabled: bool = True
    directory: Path = BACKUP_DIR
    keep_days: int = 7


BACKUP = BackupSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DATA_DIR_ENV",
    "BACKUP_DIR",
    "LOG_DIR",
    "DB_PATH",
    "LOGGING",
    "DASHBOARD",
    "CLASSROOM",
    "BACKUP",
    "ensure_data_dirs",
    "get_default_data_dir",
]
