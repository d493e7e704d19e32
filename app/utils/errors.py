# app/utils/errors.py

from fastapi import HTTPException

class BadRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)

class PersistenceError(InternalServerError):
    """The chat store rejected a read or write."""

class ForwardError(Exception):
    """The workflow webhook was unreachable, timed out or answered non-2xx."""
