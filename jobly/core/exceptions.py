"""
Domain errors raised by the crud layer and the authorization checks.

Each error carries the HTTP status it maps to; the handlers registered in
main.py turn them into ``{"error": {"message": ..., "status": ...}}``.
"""

from typing import Any, List, Union


class JoblyError(Exception):
    def __init__(self, message: Union[str, List[Any]], status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(str(message))


class BadRequestError(JoblyError):
    """400: malformed input or a broken business rule."""
    def __init__(self, message: Union[str, List[Any]] = "Bad Request"):
        super().__init__(message=message, status_code=400)


class UnauthorizedError(JoblyError):
    """401: missing or insufficient identity."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=401)


class NotFoundError(JoblyError):
    """404: the referenced entity does not exist."""
    def __init__(self, message: str = "Not Found"):
        super().__init__(message=message, status_code=404)
