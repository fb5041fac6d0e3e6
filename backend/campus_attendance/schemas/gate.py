"""
Schémas Pydantic pour le fil des entrées du portail et l'état des terminaux.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from campus_attendance.schemas.student import StudentResponse


class GateEntryResponse(BaseModel):
    """Une entrée au portail (présence sans cours)."""
    id: uuid.UUID
    status: str
    scanned_at: datetime
    student: StudentResponse

    model_config = {"from_attributes": True}


class GateEntriesResponse(BaseModel):
    entries: List[GateEntryResponse]
    total: int


class DeviceStatusResponse(BaseModel):
    """Terminal de scan avec son état de connexion calculé."""
    id: uuid.UUID
    device_code: str
    gateway_id: Optional[uuid.UUID] = None
    last_seen: Optional[datetime] = None
    is_online: bool
