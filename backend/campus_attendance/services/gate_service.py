"""
Fil des entrées au portail du jour (poste de sécurité).
"""

from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_attendance.models.attendance import Attendance
from campus_attendance.schemas.gate import GateEntriesResponse, GateEntryResponse

MAX_ENTRIES = 100


def list_recent_gate_entries(
    db: Session,
    limit: int = 10,
    today: Optional[date] = None,
) -> GateEntriesResponse:
    """
    Retourne les dernières entrées au portail depuis minuit (UTC), les plus
    récentes d'abord. Seules les présences sans cours (lecture_id NULL) comptent.
    """
    limit = max(1, min(limit, MAX_ENTRIES))
    day = today or datetime.now(timezone.utc).date()
    since = datetime.combine(day, time.min, tzinfo=timezone.utc)

    rows = db.execute(
        select(Attendance)
        .where(
            Attendance.lecture_id.is_(None),
            Attendance.scanned_at >= since,
        )
        .order_by(Attendance.scanned_at.desc())
        .limit(limit)
    ).scalars().all()

    entries = [GateEntryResponse.model_validate(row) for row in rows]
    return GateEntriesResponse(entries=entries, total=len(entries))
