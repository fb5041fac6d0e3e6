"""
Modèle SQLAlchemy pour la table students.
Géré par l'administration ; le scan ne fait que le lire.
"""

import uuid
from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID

from campus_attendance.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(String(50), unique=True, nullable=False)  # Matricule externe, ex: "STU001"
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    faculty = Column(String(150), nullable=True)
    department = Column(String(150), nullable=True)
    email = Column(String(255), nullable=True)
    photo_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
