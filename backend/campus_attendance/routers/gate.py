"""
Routers de lecture pour le poste de sécurité :
fil des entrées du jour et état des terminaux.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campus_attendance.database import get_db
from campus_attendance.schemas.gate import DeviceStatusResponse, GateEntriesResponse
from campus_attendance.services import device_service, gate_service

router = APIRouter(prefix="/api/v1", tags=["Poste de sécurité"])


@router.get(
    "/gate/entries",
    response_model=GateEntriesResponse,
    summary="Dernières entrées au portail du jour",
)
def list_gate_entries(
    limit: int = Query(10, ge=1, le=gate_service.MAX_ENTRIES),
    db: Session = Depends(get_db),
):
    """Entrées au portail (scans sans cours) depuis minuit, les plus récentes d'abord."""
    return gate_service.list_recent_gate_entries(db, limit=limit)


@router.get(
    "/devices",
    response_model=List[DeviceStatusResponse],
    summary="Terminaux de scan et leur état",
)
def list_devices(db: Session = Depends(get_db)):
    return device_service.list_devices_with_liveness(db)
