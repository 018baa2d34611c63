"""Domain errors raised by services and mapped to HTTP responses in main.py"""


class DomainError(Exception):
    """Base class for errors with a stable, user-facing message"""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Resource not found"


class RoomNotFound(NotFoundError):
    default_message = "Room not found"


class ScheduleNotFound(NotFoundError):
    default_message = "Schedule not found"


class UserNotFound(NotFoundError):
    default_message = "User not found"


class SlotUnavailable(DomainError):
    # Booking conflicts are reported as bad requests, not 409
    status_code = 400
    default_message = "Time slot already booked by another user"


class InvalidSlot(DomainError):
    default_message = "Start time is not a bookable slot for this room"


class InvalidRoomWindow(DomainError):
    default_message = "Room start time must be before end time"


class EmailAlreadyRegistered(DomainError):
    default_message = "Email already registered"


class InvalidCredentials(DomainError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(DomainError):
    status_code = 403
    default_message = "You do not have permission to perform this action"
