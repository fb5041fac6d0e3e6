# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from campus_attendance.models.student import Student  # noqa: F401
from campus_attendance.models.card import Card  # noqa: F401
from campus_attendance.models.gateway import Device, Gateway  # noqa: F401
from campus_attendance.models.lecture import Lecture  # noqa: F401
from campus_attendance.models.attendance import Attendance  # noqa: F401
