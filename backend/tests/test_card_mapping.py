"""
Tests unitaires pour la correspondance UID → matricule et le calcul du statut.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from campus_attendance.services.card_mapping import DEMO_CARD_MAPPING, resolve_external_student_id
from campus_attendance.services.status_policy import determine_status

START = datetime(2026, 10, 12, 8, 0, tzinfo=timezone.utc)


def make_lecture(starts_at=START):
    lecture = MagicMock()
    lecture.starts_at = starts_at
    return lecture


class TestResolveExternalStudentId:
    def test_cartes_demo(self):
        assert resolve_external_student_id("NFC001234567890") == "STU001"
        assert resolve_external_student_id("NFC001234567897") == "STU008"
        assert len(DEMO_CARD_MAPPING) == 8

    def test_uid_inconnu_inchange(self):
        assert resolve_external_student_id("UNMAPPED999") == "UNMAPPED999"
        assert resolve_external_student_id("STU003") == "STU003"

    def test_prefixe_nfc_hors_table(self):
        assert resolve_external_student_id("NFC000") == "NFC000"

    def test_sans_correspondance_demo(self):
        assert resolve_external_student_id("NFC001234567890", use_demo_mapping=False) == "NFC001234567890"


class TestDetermineStatus:
    def test_portail_toujours_present(self):
        assert determine_status(START + timedelta(hours=3), None, True, 10) == "present"

    def test_desactive(self):
        assert determine_status(START + timedelta(hours=1), make_lecture(), False, 10) == "present"

    def test_dans_la_marge(self):
        assert determine_status(START + timedelta(minutes=10), make_lecture(), True, 10) == "present"

    def test_apres_la_marge(self):
        assert determine_status(START + timedelta(minutes=11), make_lecture(), True, 10) == "late"

    def test_debut_sans_fuseau_considere_utc(self):
        lecture = make_lecture(starts_at=START.replace(tzinfo=None))
        assert determine_status(START + timedelta(minutes=30), lecture, True, 10) == "late"
