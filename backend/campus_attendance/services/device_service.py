"""
État de connexion des terminaux de scan.

Un terminal est considéré en ligne si son dernier scan réussi (last_seen)
date de moins de DEVICE_STALE_MINUTES.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_attendance.config import settings
from campus_attendance.models.gateway import Device
from campus_attendance.schemas.gate import DeviceStatusResponse


def is_device_online(device: Device, now: datetime, stale_minutes: int) -> bool:
    if device.last_seen is None:
        return False
    last_seen = device.last_seen
    if last_seen.tzinfo is None:
        last_seen = last_seen.replace(tzinfo=timezone.utc)
    return now - last_seen <= timedelta(minutes=stale_minutes)


def list_devices_with_liveness(db: Session, now: Optional[datetime] = None) -> List[DeviceStatusResponse]:
    """Retourne tous les terminaux, triés par code, avec leur état en ligne/hors ligne."""
    now = now or datetime.now(timezone.utc)
    devices = db.execute(select(Device).order_by(Device.device_code)).scalars().all()
    return [
        DeviceStatusResponse(
            id=device.id,
            device_code=device.device_code,
            gateway_id=device.gateway_id,
            last_seen=device.last_seen,
            is_online=is_device_online(device, now, settings.DEVICE_STALE_MINUTES),
        )
        for device in devices
    ]


def find_stale_devices(db: Session, now: Optional[datetime] = None) -> List[Device]:
    """Terminaux jamais vus ou silencieux depuis plus de DEVICE_STALE_MINUTES."""
    now = now or datetime.now(timezone.utc)
    devices = db.execute(select(Device).order_by(Device.device_code)).scalars().all()
    return [d for d in devices if not is_device_online(d, now, settings.DEVICE_STALE_MINUTES)]
