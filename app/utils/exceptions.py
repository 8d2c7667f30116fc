"""Custom exceptions for the Overflow services."""
from fastapi import HTTPException


class NotFoundError(HTTPException):
    """Requested resource does not exist."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=404, detail=detail)


class ForbiddenError(HTTPException):
    """Caller does not own the resource."""
    def __init__(self, detail: str = "You are not allowed to modify this resource"):
        super().__init__(status_code=403, detail=detail)


class ValidationError(HTTPException):
    """Input validation errors and rejected state transitions."""
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=400, detail=detail)


class DatabaseError(HTTPException):
    """Database-related errors."""
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(status_code=500, detail=detail)


class BrokerError(HTTPException):
    """Message broker errors."""
    def __init__(self, detail: str = "Message broker unavailable"):
        super().__init__(status_code=503, detail=detail)


class SearchIndexError(HTTPException):
    """Search index (Typesense) errors."""
    def __init__(self, detail: str = "Search index unavailable"):
        super().__init__(status_code=503, detail=detail)
