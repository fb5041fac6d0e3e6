"""
Modèle SQLAlchemy pour le journal des présences (append-only).

- Une ligne par scan réussi, jamais modifiée ni supprimée.
- Scans de portail : lecture_id NULL, pas de dédoublonnage.
- Scans de cours : au plus une ligne par (étudiant, cours), garanti par
  la contrainte uq_attendance_student_lecture (NULL ≠ NULL en SQL).
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from campus_attendance.database import Base


class Attendance(Base):
    """Présence enregistrée par un scan NFC."""
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "lecture_id", name="uq_attendance_student_lecture"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    card_id = Column(UUID(as_uuid=True), ForeignKey("cards.id"), nullable=False)
    lecture_id = Column(UUID(as_uuid=True), ForeignKey("lectures.id"), nullable=True)
    gateway_id = Column(UUID(as_uuid=True), ForeignKey("gateways.id"), nullable=False)
    device_id = Column(UUID(as_uuid=True), ForeignKey("devices.id"), nullable=False)

    status = Column(String(20), nullable=False)            # present, late
    scanned_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    student = relationship("Student", lazy="joined")
