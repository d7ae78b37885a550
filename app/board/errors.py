# app/board/errors.py


class BoardError(Exception):
    """Base class for errors raised by the board engine."""


class BoardValidationError(BoardError, ValueError):
    """Input rejected before any local mutation or persistence call."""


class DuplicateNumberError(BoardValidationError):
    def __init__(self, number: int):
        super().__init__(f"Ticket number {number:02d} is already in use")
        self.number = number


class UnknownEntityError(BoardError, LookupError):
    def __init__(self, kind: str, entity_id):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class GatewayError(BoardError):
    """A persistence call failed (transport error or error response)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
