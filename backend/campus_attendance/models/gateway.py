"""
Modèles SQLAlchemy pour les points d'entrée du campus et leurs terminaux de scan.
Pré-provisionnés ; seul Device.last_seen est mis à jour par le scan.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID

from campus_attendance.database import Base


class Gateway(Base):
    """Point d'entrée physique (ex: MAIN_GATE)."""
    __tablename__ = "gateways"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Device(Base):
    """Terminal de scan rattaché à un point d'entrée."""
    __tablename__ = "devices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    device_code = Column(String(50), unique=True, nullable=False)
    gateway_id = Column(UUID(as_uuid=True), ForeignKey("gateways.id", ondelete="SET NULL"), nullable=True)
    last_seen = Column(DateTime(timezone=True), nullable=True)  # Dernier scan réussi
    created_at = Column(DateTime, server_default=func.now())
