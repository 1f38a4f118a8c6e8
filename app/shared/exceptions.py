"""Domain errors raised by the booking services and mapped to HTTP responses in main.py"""


class BookingError(Exception):
    """Base class for errors that carry a client-facing message"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Missing or invalid input: required fields, unknown status, non-finite coordinates"""

    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class ConflictError(BookingError):
    """A unique field (e.g. tracking ID) could not be written"""

    status_code = 409
