"""
Schémas Pydantic pour l'enregistrement d'une présence par scan NFC.
Endpoint : POST /api/scan
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from campus_attendance.schemas.student import StudentResponse


class ScanRequest(BaseModel):
    """Scan d'une carte NFC sur un terminal."""

    card_uid: str = ""
    device_code: str = ""
    gateway_code: str = ""
    lecture_id: Optional[uuid.UUID] = None    # Absent = scan de portail (pas de dédoublonnage)

    @field_validator("card_uid", "device_code", "gateway_code", mode="before")
    @classmethod
    def strip_or_empty(cls, v):
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("Valeur texte attendue.")
        return v.strip()

    @field_validator("lecture_id", mode="before")
    @classmethod
    def empty_lecture_is_none(cls, v):
        # Le poste de sécurité envoie parfois "" pour un scan de portail
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ScanResponse(BaseModel):
    """Réponse d'un scan réussi."""

    ok: Literal[True] = True
    student: StudentResponse
    attendance_id: uuid.UUID
    status: str
    scanned_at: datetime
    card_created: bool


class ScanErrorResponse(BaseModel):
    """Enveloppe d'erreur commune à tous les échecs du scan."""

    ok: Literal[False] = False
    error: str
