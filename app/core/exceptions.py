"""
Error taxonomy raised by the table, order and waiter services.

Each error carries the HTTP status the API answers with; the handlers
registered in ``main.py`` turn them into ``{"message": ...}`` bodies.
"""


class POSError(Exception):
    """Base class for expected service failures"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(POSError):
    """Missing or malformed input"""

    status_code = 400


class ConflictError(POSError):
    """Uniqueness constraint violated (duplicate table number)"""

    status_code = 400


class NotFoundError(POSError):
    """Referenced table, order or waiter does not exist"""

    status_code = 404

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class InternalError(POSError):
    """Store or configuration failure; details stay in the server log"""

    status_code = 500
