"""
Modèle SQLAlchemy pour les cartes NFC liées aux étudiants.

Une carte est créée au premier scan réussi d'un UID inconnu.
Les contraintes d'unicité arbitrent les scans concurrents du même UID :
un seul INSERT réussit, le perdant relit la ligne gagnante.
"""

import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, UniqueConstraint, func, text
from sqlalchemy.dialects.postgresql import UUID

from campus_attendance.database import Base


class Card(Base):
    """Carte NFC physique ↔ étudiant."""
    __tablename__ = "cards"
    __table_args__ = (
        UniqueConstraint("card_uid", "student_id", "is_active", name="uq_cards_uid_student_active"),
        # Un UID n'est porté que par une seule carte active
        Index(
            "uq_cards_active_uid",
            "card_uid",
            unique=True,
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    card_uid = Column(String(100), nullable=False)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
