"""
Tests unitaires pour ScanStore (accès BDD du scan).
Vérifient les commits immédiats, le rollback et la traduction des violations
de contrainte d'unicité en DuplicateRowError.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from campus_attendance.exceptions import DuplicateRowError
from campus_attendance.models.attendance import Attendance
from campus_attendance.models.card import Card
from campus_attendance.models.lecture import Lecture
from campus_attendance.services.scan_store import ScanStore, is_unique_violation

NOW = datetime(2026, 10, 12, 8, 5, tzinfo=timezone.utc)


def make_db(scalar=None):
    db = MagicMock()
    db.execute.return_value.scalar.return_value = scalar
    return db


class PgError(Exception):
    """Erreur DBAPI minimale portant un code SQLSTATE, comme psycopg2."""

    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def unique_violation():
    return IntegrityError("INSERT", {}, PgError("duplicate key value violates unique constraint", "23505"))


def foreign_key_violation():
    return IntegrityError("INSERT", {}, PgError("insert or update violates foreign key constraint", "23503"))


# ============================================================
# Lectures
# ============================================================

class TestLookups:
    def test_portail_trouve(self):
        gateway = MagicMock()
        store = ScanStore(make_db(scalar=gateway))
        assert store.find_gateway("MAIN_GATE") is gateway

    def test_terminal_introuvable(self):
        store = ScanStore(make_db(scalar=None))
        assert store.find_device("DEV999") is None

    def test_etudiant_par_matricule(self):
        student = MagicMock()
        db = make_db(scalar=student)
        assert ScanStore(db).find_student_by_external_id("STU001") is student
        db.execute.assert_called_once()

    def test_carte_active(self):
        card = MagicMock(spec=Card)
        store = ScanStore(make_db(scalar=card))
        assert store.find_active_card("NFC001234567890", uuid.uuid4()) is card

    def test_presence_existante(self):
        existing = MagicMock(spec=Attendance)
        store = ScanStore(make_db(scalar=existing))
        assert store.find_attendance(uuid.uuid4(), uuid.uuid4()) is existing

    def test_cours_par_id(self):
        db = MagicMock()
        lecture_id = uuid.uuid4()
        ScanStore(db).find_lecture(lecture_id)
        db.get.assert_called_once_with(Lecture, lecture_id)


# ============================================================
# create_card
# ============================================================

class TestCreateCard:
    def test_insert_et_commit(self):
        db = MagicMock()
        student_id = uuid.uuid4()

        card = ScanStore(db).create_card("NFC001234567890", student_id)

        assert isinstance(card, Card)
        assert card.card_uid == "NFC001234567890"
        assert card.student_id == student_id
        assert card.is_active is True
        db.add.assert_called_once_with(card)
        db.commit.assert_called_once()
        db.refresh.assert_called_once_with(card)

    def test_violation_unicite(self):
        db = MagicMock()
        db.commit.side_effect = unique_violation()

        with pytest.raises(DuplicateRowError):
            ScanStore(db).create_card("NFC001234567890", uuid.uuid4())
        db.rollback.assert_called_once()
        db.refresh.assert_not_called()

    def test_violation_cle_etrangere_propagee(self):
        """Une violation de FK n'est pas un doublon : l'IntegrityError est propagée."""
        db = MagicMock()
        db.commit.side_effect = foreign_key_violation()

        with pytest.raises(IntegrityError):
            ScanStore(db).create_card("NFC001234567890", uuid.uuid4())
        db.rollback.assert_called_once()

    def test_erreur_bdd_propagee(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))

        with pytest.raises(OperationalError):
            ScanStore(db).create_card("NFC001234567890", uuid.uuid4())
        db.rollback.assert_called_once()


# ============================================================
# create_attendance
# ============================================================

class TestCreateAttendance:
    def test_champs_mappes(self):
        db = MagicMock()
        ids = {k: uuid.uuid4() for k in ("student_id", "card_id", "lecture_id", "gateway_id", "device_id")}

        attendance = ScanStore(db).create_attendance(status="present", scanned_at=NOW, **ids)

        assert isinstance(attendance, Attendance)
        for key, value in ids.items():
            assert getattr(attendance, key) == value
        assert attendance.status == "present"
        assert attendance.scanned_at == NOW
        db.commit.assert_called_once()

    def test_doublon_cours(self):
        db = MagicMock()
        db.commit.side_effect = unique_violation()

        with pytest.raises(DuplicateRowError):
            ScanStore(db).create_attendance(
                student_id=uuid.uuid4(),
                card_id=uuid.uuid4(),
                lecture_id=uuid.uuid4(),
                gateway_id=uuid.uuid4(),
                device_id=uuid.uuid4(),
                status="present",
                scanned_at=NOW,
            )
        db.rollback.assert_called_once()


# ============================================================
# update_device_last_seen
# ============================================================

class TestUpdateDevice:
    def test_update_commit(self):
        db = MagicMock()
        ScanStore(db).update_device_last_seen(uuid.uuid4(), NOW)
        db.execute.assert_called_once()
        db.commit.assert_called_once()

    def test_echec_rollback(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("UPDATE", {}, Exception("timeout"))

        with pytest.raises(OperationalError):
            ScanStore(db).update_device_last_seen(uuid.uuid4(), NOW)
        db.rollback.assert_called_once()


# ============================================================
# is_unique_violation
# ============================================================

class TestIsUniqueViolation:
    def test_code_postgres_unicite(self):
        assert is_unique_violation(unique_violation()) is True

    def test_code_postgres_cle_etrangere(self):
        assert is_unique_violation(foreign_key_violation()) is False

    def test_message_sqlite(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: cards.card_uid"))
        assert is_unique_violation(exc) is True

    def test_not_null(self):
        exc = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: attendance.card_id"))
        assert is_unique_violation(exc) is False
