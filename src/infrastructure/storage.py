"""
Storage Module

Keeps a JSON snapshot of the roster on disk so an editing session can be
resumed. Reading never raises: a missing or unreadable snapshot yields None.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from domain.calendar_helper import HolidayCalendar
from domain.errors import AttendanceError
from domain.roster import Roster
from infrastructure.logger import get_logger

logger = get_logger("SnapshotStore")


class SnapshotStore:
    """
    JSON snapshot file for a roster.

    File format: {"employees": [...], "month", "year", "timestamp", "version"}
    """

    DEFAULT_FILE_NAME = "attendance_backup.json"

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, roster: Roster, saved_at: Optional[datetime] = None) -> Path:
        """
        Write the roster snapshot, replacing any previous one.

        Raises:
            OSError: If the file cannot be written
        """
        data = roster.to_snapshot(saved_at)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Saved snapshot of {len(roster)} employee(s) to {self.path.name}")
        return self.path

    def read(self) -> Optional[Dict[str, Any]]:
        """Raw snapshot data, or None when missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read snapshot {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Snapshot {self.path} does not hold an object")
            return None
        return data

    def load(self, holidays: Optional[HolidayCalendar] = None) -> Optional[Roster]:
        """
        Rebuild the saved roster.

        Returns:
            The roster, or None when the snapshot is missing or unreadable
        """
        data = self.read()
        if data is None:
            return None
        try:
            roster = Roster.from_snapshot(data, holidays)
        except (AttendanceError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Snapshot {self.path} could not be restored: {e}")
            return None
        logger.info(f"Restored {len(roster)} employee(s) from {self.path.name}")
        return roster

    def clear(self) -> None:
        """Delete the snapshot file if present."""
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Removed snapshot {self.path.name}")
