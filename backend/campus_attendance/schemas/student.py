"""
Schémas Pydantic pour les étudiants (lecture seule côté scan).
"""

import uuid
from typing import Optional

from pydantic import BaseModel


class StudentResponse(BaseModel):
    """Fiche étudiant renvoyée au poste de sécurité après un scan."""
    id: uuid.UUID
    student_id: str
    first_name: str
    last_name: str
    faculty: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None

    model_config = {"from_attributes": True}
