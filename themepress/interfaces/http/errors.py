"""Translation of domain errors into HTTP errors."""

from fastapi import HTTPException, status

from themepress.modules.common.exceptions import (
    ChecksumMismatchError,
    InvalidPathError,
    NotFoundError,
    ThemePressError,
)
from themepress.modules.drafts import InvalidTemplateDocumentError
from themepress.modules.publishing import EmptyDraftError, PublishConflictError

_STATUS_BY_ERROR: tuple[tuple[type[ThemePressError], int], ...] = (
    (InvalidPathError, status.HTTP_400_BAD_REQUEST),
    (InvalidTemplateDocumentError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PublishConflictError, status.HTTP_409_CONFLICT),
    (EmptyDraftError, status.HTTP_409_CONFLICT),
    (ChecksumMismatchError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def http_error(exc: ThemePressError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


__all__ = ["http_error"]
