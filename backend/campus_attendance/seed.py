"""
Données de démonstration : portail MAIN_GATE, terminal DEV001 et les
étudiants STU001 à STU008 ciblés par les cartes NFC de démonstration.

Usage : python -m campus_attendance.seed
Idempotent : une ligne déjà présente (même code / matricule) n'est pas recréée.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

import campus_attendance.models  # noqa: F401
from campus_attendance.database import Base, SessionLocal, engine
from campus_attendance.models.gateway import Device, Gateway
from campus_attendance.models.student import Student

logger = logging.getLogger(__name__)

DEMO_GATEWAY = {"code": "MAIN_GATE", "name": "Entrée principale"}
DEMO_DEVICE_CODE = "DEV001"

DEMO_STUDENTS = [
    ("STU001", "Amina", "Benali", "Sciences", "Informatique"),
    ("STU002", "Lucas", "Martin", "Sciences", "Mathématiques"),
    ("STU003", "Sofia", "Rossi", "Lettres", "Histoire"),
    ("STU004", "Yanis", "Haddad", "Ingénierie", "Génie civil"),
    ("STU005", "Emma", "Dubois", "Médecine", "Biologie"),
    ("STU006", "Noah", "Lambert", "Droit", "Droit public"),
    ("STU007", "Chloé", "Leroy", "Économie", "Gestion"),
    ("STU008", "Adam", "Moreau", "Sciences", "Physique"),
]


def seed_demo_data(db: Session) -> dict:
    """
    Insère les données de démonstration manquantes et retourne le nombre de
    lignes créées par type.
    """
    created = {"gateways": 0, "devices": 0, "students": 0}

    gateway = db.execute(select(Gateway).where(Gateway.code == DEMO_GATEWAY["code"])).scalar()
    if gateway is None:
        gateway = Gateway(id=uuid.uuid4(), **DEMO_GATEWAY)
        db.add(gateway)
        created["gateways"] += 1

    device = db.execute(select(Device).where(Device.device_code == DEMO_DEVICE_CODE)).scalar()
    if device is None:
        db.add(Device(device_code=DEMO_DEVICE_CODE, gateway_id=gateway.id))
        created["devices"] += 1

    existing_ids = set(
        db.execute(
            select(Student.student_id).where(Student.student_id.in_([s[0] for s in DEMO_STUDENTS]))
        ).scalars().all()
    )
    for student_id, first_name, last_name, faculty, department in DEMO_STUDENTS:
        if student_id in existing_ids:
            continue
        db.add(Student(
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            faculty=faculty,
            department=department,
            email=f"{student_id.lower()}@campus.example",
        ))
        created["students"] += 1

    db.commit()
    logger.info(
        "Seed : %d portail(s), %d terminal(aux), %d étudiant(s) créés",
        created["gateways"], created["devices"], created["students"],
    )
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_demo_data(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
