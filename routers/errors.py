# routers/errors.py
from fastapi import HTTPException, status

from services.exceptions import (
     AuthorizationError,
     ConflictError,
     IkhayaError,
     NotFoundError,
     ValidationError,
)

_STATUS_BY_ERROR = (
     (ValidationError, status.HTTP_400_BAD_REQUEST),
     (NotFoundError, status.HTTP_404_NOT_FOUND),
     (AuthorizationError, status.HTTP_403_FORBIDDEN),
     (ConflictError, status.HTTP_409_CONFLICT),
)


def http_error(exc: IkhayaError) -> HTTPException:
     """Translate a domain error into the HTTPException returned to the caller."""
     for error_type, status_code in _STATUS_BY_ERROR:
          if isinstance(exc, error_type):
               return HTTPException(status_code=status_code, detail=str(exc))
     return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
