"""
Erreurs métier du scan NFC.

Chaque erreur porte son code (renvoyé tel quel dans {"ok": false, "error": code})
et le statut HTTP associé. Le router se charge de la conversion en réponse JSON.
"""


class ScanError(Exception):
    code = "internal_server_error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)


class InvalidRequestError(ScanError):
    code = "invalid_request"
    status_code = 400


class GatewayOrDeviceNotFoundError(ScanError):
    code = "gateway_or_device_not_found"
    status_code = 404


class StudentNotFoundError(ScanError):
    code = "student_not_found"
    status_code = 404


class CardNotRegisteredError(ScanError):
    code = "card_not_registered"
    status_code = 404


class LectureNotFoundError(ScanError):
    code = "lecture_not_found"
    status_code = 404


class AlreadyRecordedError(ScanError):
    code = "already_recorded"
    status_code = 409


class CardCreationError(ScanError):
    code = "card_creation_failed"
    status_code = 500


class AttendanceRecordingError(ScanError):
    code = "attendance_recording_failed"
    status_code = 500


class DuplicateRowError(Exception):
    """Violation d'une contrainte d'unicité, levée par ScanStore après rollback."""
