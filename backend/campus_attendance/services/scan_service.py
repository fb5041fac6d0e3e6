"""
Service d'enregistrement des présences par scan NFC.

Déroulé d'un scan :
1. Validation des champs obligatoires (card_uid, device_code, gateway_code)
2. Résolution du portail et du terminal
3. UID → matricule (cartes de démonstration) → étudiant
4. Carte active de l'étudiant, créée au premier scan si absente
5. Scan de cours : cours existant + au plus une présence par (étudiant, cours)
6. Ajout de la présence au journal
7. Mise à jour de last_seen du terminal (best effort)

Les contraintes d'unicité en base restent la garantie finale face aux scans
concurrents ; les vérifications préalables ne font qu'éviter un INSERT inutile.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from campus_attendance.config import settings
from campus_attendance.exceptions import (
    AlreadyRecordedError,
    AttendanceRecordingError,
    CardCreationError,
    CardNotRegisteredError,
    DuplicateRowError,
    GatewayOrDeviceNotFoundError,
    InvalidRequestError,
    LectureNotFoundError,
    StudentNotFoundError,
)
from campus_attendance.models.card import Card
from campus_attendance.models.student import Student
from campus_attendance.schemas.scan import ScanRequest, ScanResponse
from campus_attendance.schemas.student import StudentResponse
from campus_attendance.services.card_mapping import resolve_external_student_id
from campus_attendance.services.scan_store import ScanStore
from campus_attendance.services.status_policy import determine_status

logger = logging.getLogger(__name__)


def process_scan(
    store: ScanStore,
    request: ScanRequest,
    now: Optional[datetime] = None,
) -> ScanResponse:
    """
    Enregistre la présence correspondant à un scan de carte.

    Lève une sous-classe de ScanError en cas d'échec ; aucune écriture n'a
    alors eu lieu, sauf une éventuelle carte créée avant l'échec.
    """
    if not request.card_uid or not request.device_code or not request.gateway_code:
        raise InvalidRequestError("card_uid, device_code et gateway_code sont obligatoires.")

    gateway = store.find_gateway(request.gateway_code)
    device = store.find_device(request.device_code)
    if gateway is None or device is None:
        logger.info(
            "Scan refusé : portail %s ou terminal %s inconnu",
            request.gateway_code, request.device_code,
        )
        raise GatewayOrDeviceNotFoundError()

    external_id = resolve_external_student_id(
        request.card_uid, use_demo_mapping=settings.DEMO_CARD_MAPPING_ENABLED
    )
    student = store.find_student_by_external_id(external_id)
    if student is None:
        logger.info("Scan refusé : aucun étudiant pour la carte %s", request.card_uid)
        raise StudentNotFoundError()

    card, card_created = _resolve_card(store, request.card_uid, student)

    lecture = None
    if request.lecture_id is not None:
        lecture = store.find_lecture(request.lecture_id)
        if lecture is None:
            raise LectureNotFoundError()
        if store.find_attendance(student.id, request.lecture_id) is not None:
            raise AlreadyRecordedError()

    scanned_at = now or datetime.now(timezone.utc)
    status = determine_status(
        scanned_at,
        lecture,
        late_enabled=settings.LATE_STATUS_ENABLED,
        grace_minutes=settings.LATE_GRACE_MINUTES,
    )

    try:
        attendance = store.create_attendance(
            student_id=student.id,
            card_id=card.id,
            lecture_id=request.lecture_id,
            gateway_id=gateway.id,
            device_id=device.id,
            status=status,
            scanned_at=scanned_at,
        )
    except DuplicateRowError as exc:
        if request.lecture_id is None:
            # Les scans de portail ne sont soumis à aucune contrainte d'unicité
            logger.error("Conflit inattendu sur un scan de portail : %s", exc)
            raise AttendanceRecordingError() from exc
        # Un scan concurrent a gagné la course sur (étudiant, cours)
        raise AlreadyRecordedError()
    except SQLAlchemyError as exc:
        logger.error("Échec d'enregistrement de la présence : %s", exc, exc_info=True)
        raise AttendanceRecordingError() from exc

    try:
        store.update_device_last_seen(device.id, scanned_at)
    except SQLAlchemyError as exc:
        logger.warning("Mise à jour last_seen impossible pour %s : %s", request.device_code, exc)

    logger.info(
        "Présence %s enregistrée : étudiant=%s portail=%s terminal=%s cours=%s statut=%s",
        attendance.id, student.student_id, request.gateway_code,
        request.device_code, request.lecture_id or "-", status,
    )

    return ScanResponse(
        student=StudentResponse.model_validate(student),
        attendance_id=attendance.id,
        status=status,
        scanned_at=scanned_at,
        card_created=card_created,
    )


def _resolve_card(store: ScanStore, card_uid: str, student: Student) -> Tuple[Card, bool]:
    """Retourne (carte active, créée ?) pour (card_uid, étudiant), en créant la carte si besoin."""
    card = store.find_active_card(card_uid, student.id)
    if card is not None:
        return card, False

    if not settings.AUTO_PROVISION_CARDS:
        logger.info("Carte %s non enregistrée pour l'étudiant %s", card_uid, student.student_id)
        raise CardNotRegisteredError()

    try:
        card = store.create_card(card_uid, student.id)
    except DuplicateRowError:
        # Créée par un scan concurrent : on relit la ligne gagnante
        card = store.find_active_card(card_uid, student.id)
        if card is None:
            logger.error("Conflit à la création de la carte %s sans carte active existante", card_uid)
            raise CardCreationError()
        return card, False
    except SQLAlchemyError as exc:
        logger.error("Échec de création de la carte %s : %s", card_uid, exc, exc_info=True)
        raise CardCreationError() from exc

    logger.info("Nouvelle carte %s liée à l'étudiant %s", card_uid, student.student_id)
    return card, True
