"""
Calcul du statut d'une présence : present ou late.

Un scan de cours est "late" s'il arrive après le début du cours augmenté de
la marge de tolérance. Les scans de portail sont toujours "present".
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from campus_attendance.models.lecture import Lecture

STATUS_PRESENT = "present"
STATUS_LATE = "late"


def determine_status(
    scanned_at: datetime,
    lecture: Optional[Lecture],
    late_enabled: bool,
    grace_minutes: int,
) -> str:
    if not late_enabled or lecture is None or lecture.starts_at is None:
        return STATUS_PRESENT

    starts_at = lecture.starts_at
    if starts_at.tzinfo is None:
        starts_at = starts_at.replace(tzinfo=timezone.utc)

    if scanned_at > starts_at + timedelta(minutes=grace_minutes):
        return STATUS_LATE
    return STATUS_PRESENT
