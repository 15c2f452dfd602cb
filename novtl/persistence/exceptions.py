"""
Persistence exceptions.
"""


class PersistenceError(Exception):
    """Raised when the record store fails; the operation is not committed.

    Attributes:
        operation: Gateway operation that failed (put, delete, list, clear)
    """
    def __init__(self, message: str, operation: str = None):
        super().__init__(message)
        self.operation = operation
