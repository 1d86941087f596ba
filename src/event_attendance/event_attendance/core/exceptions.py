class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced event, location or student does not exist."""


class EventStateError(DomainError):
    """Raised when an operation is not allowed in the current event or record state."""


class EventNotOngoingError(EventStateError):
    """Raised when a ping arrives for an event that is not ONGOING."""


class MonitoringDisabledError(EventStateError):
    """Raised when a ping arrives for an event without location monitoring."""


class LocationMismatchError(EventStateError):
    """Raised when the claimed location is not the one the event expects."""


class NotRegisteredError(EventStateError):
    """Raised when a student has no attendance record for the event."""


class IneligibleRecordError(EventStateError):
    """Raised when the student's record status does not accept pings."""


class IneligibleStudentError(EventStateError):
    """Raised when a student is outside the event's audience."""


class OutsideGeofenceError(EventStateError):
    """Raised when a check-in position is outside the required boundary."""


class DuplicateRecordError(DomainError):
    """Raised when an attendance record already exists for (student, event)."""


class FaceVerificationError(DomainError):
    """Raised when facial verification rejects a check-in."""


class PersistenceError(DomainError):
    """Raised when the storage layer fails; callers may retry."""


class ServiceUnavailableError(DomainError):
    """Raised when an external collaborator cannot be reached."""
