"""
Accès aux données nécessaires au scan NFC.

ScanStore regroupe les lectures/écritures du scan sur une session SQLAlchemy.
Il est injecté dans scan_service.process_scan (et remplacé par un mock en test).

Toute écriture est commitée immédiatement : une carte créée reste en base
même si l'enregistrement de la présence échoue ensuite.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from psycopg2 import errorcodes
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campus_attendance.exceptions import DuplicateRowError
from campus_attendance.models.attendance import Attendance
from campus_attendance.models.card import Card
from campus_attendance.models.gateway import Device, Gateway
from campus_attendance.models.lecture import Lecture
from campus_attendance.models.student import Student

logger = logging.getLogger(__name__)

# Message SQLite équivalent au code PostgreSQL 23505 (base de test)
SQLITE_UNIQUE_MESSAGE = "UNIQUE constraint failed"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Vrai si l'IntegrityError vient d'une contrainte d'unicité (et non FK / NOT NULL)."""
    if getattr(exc.orig, "pgcode", None) == errorcodes.UNIQUE_VIOLATION:
        return True
    return SQLITE_UNIQUE_MESSAGE in str(exc.orig)


class ScanStore:
    def __init__(self, db: Session):
        self.db = db

    # --- Lectures ---

    def find_gateway(self, code: str) -> Optional[Gateway]:
        return self.db.execute(select(Gateway).where(Gateway.code == code)).scalar()

    def find_device(self, code: str) -> Optional[Device]:
        return self.db.execute(select(Device).where(Device.device_code == code)).scalar()

    def find_student_by_external_id(self, external_id: str) -> Optional[Student]:
        return self.db.execute(select(Student).where(Student.student_id == external_id)).scalar()

    def find_active_card(self, card_uid: str, student_id: uuid.UUID) -> Optional[Card]:
        return self.db.execute(
            select(Card).where(
                Card.card_uid == card_uid,
                Card.student_id == student_id,
                Card.is_active.is_(True),
            )
        ).scalar()

    def find_lecture(self, lecture_id: uuid.UUID) -> Optional[Lecture]:
        return self.db.get(Lecture, lecture_id)

    def find_attendance(self, student_id: uuid.UUID, lecture_id: uuid.UUID) -> Optional[Attendance]:
        return self.db.execute(
            select(Attendance).where(
                Attendance.student_id == student_id,
                Attendance.lecture_id == lecture_id,
            )
        ).scalar()

    # --- Écritures ---

    def create_card(self, card_uid: str, student_id: uuid.UUID) -> Card:
        """
        Insère une carte active. Lève DuplicateRowError si un scan concurrent
        l'a créée entre-temps (contrainte d'unicité), SQLAlchemyError sinon.
        """
        card = Card(card_uid=card_uid, student_id=student_id, is_active=True)
        self._insert(card)
        return card

    def create_attendance(
        self,
        *,
        student_id: uuid.UUID,
        card_id: uuid.UUID,
        lecture_id: Optional[uuid.UUID],
        gateway_id: uuid.UUID,
        device_id: uuid.UUID,
        status: str,
        scanned_at: datetime,
    ) -> Attendance:
        """
        Ajoute une présence au journal. Lève DuplicateRowError si une présence
        existe déjà pour (student_id, lecture_id).
        """
        attendance = Attendance(
            student_id=student_id,
            card_id=card_id,
            lecture_id=lecture_id,
            gateway_id=gateway_id,
            device_id=device_id,
            status=status,
            scanned_at=scanned_at,
        )
        self._insert(attendance)
        return attendance

    def update_device_last_seen(self, device_id: uuid.UUID, when: datetime) -> None:
        try:
            self.db.execute(update(Device).where(Device.id == device_id).values(last_seen=when))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _insert(self, obj) -> None:
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                raise DuplicateRowError(str(exc.orig)) from exc
            raise
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(obj)
