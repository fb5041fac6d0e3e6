"""
Router du scan NFC : POST /api/scan

Toutes les réponses suivent l'enveloppe {"ok": true, ...} / {"ok": false, "error": code}.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from campus_attendance.database import get_db
from campus_attendance.exceptions import ScanError
from campus_attendance.schemas.scan import ScanErrorResponse, ScanRequest, ScanResponse
from campus_attendance.services import scan_service
from campus_attendance.services.scan_store import ScanStore

logger = logging.getLogger(__name__)

SCAN_PATH = "/api/scan"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

router = APIRouter(tags=["Scan NFC"])


def get_scan_store(db: Session = Depends(get_db)) -> ScanStore:
    """Dépendance FastAPI — ScanStore sur la session de la requête."""
    return ScanStore(db)


def error_response(code: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ScanErrorResponse(error=code).model_dump(),
        headers=CORS_HEADERS,
    )


@router.post(
    SCAN_PATH,
    response_model=ScanResponse,
    responses={
        400: {"model": ScanErrorResponse},
        404: {"model": ScanErrorResponse},
        409: {"model": ScanErrorResponse},
        500: {"model": ScanErrorResponse},
    },
    summary="Enregistrer une présence par scan de carte NFC",
)
def scan_card(data: ScanRequest, store: ScanStore = Depends(get_scan_store)):
    """
    Résout la carte vers un étudiant, crée la carte au premier scan,
    refuse un second scan pour le même cours et enregistre la présence.

    - 400 invalid_request : champ obligatoire manquant
    - 404 gateway_or_device_not_found / student_not_found / card_not_registered / lecture_not_found
    - 409 already_recorded : présence déjà enregistrée pour ce cours
    - 500 card_creation_failed / attendance_recording_failed
    """
    try:
        result = scan_service.process_scan(store, data)
    except ScanError as e:
        return error_response(e.code, e.status_code)
    return JSONResponse(content=result.model_dump(mode="json"), headers=CORS_HEADERS)


@router.options(SCAN_PATH, include_in_schema=False)
def scan_preflight():
    """Preflight CORS : 200 sans corps."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(SCAN_PATH, methods=["GET", "PUT", "DELETE", "PATCH"], include_in_schema=False)
def scan_method_not_allowed():
    return error_response("method_not_allowed", 405)
