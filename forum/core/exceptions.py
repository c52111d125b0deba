"""
HTTP errors raised by the forum services.

Each one is a plain ``HTTPException`` so FastAPI renders it as
``{"detail": message}`` with the matching status code.
"""
from fastapi import HTTPException, status


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidArgument(HTTPException):
    def __init__(self, detail: str = "Invalid argument"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Forbidden(HTTPException):
    """Caller is authenticated but does not own the resource.

    Ownership failures are reported as 401, which is what the forum
    frontend expects from the post and comment endpoints.
    """

    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AdminRequired(HTTPException):
    def __init__(self, detail: str = "Admin privileges required"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class DatabaseError(HTTPException):
    def __init__(self, detail: str = "Database error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
