from fastapi import HTTPException, status

from dashboard.services.repository import (
    ErrorKind,
    RepositoryError,
    RepositoryReferenceError,
    RepositoryValidationError,
)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.REFERENCE: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def failed_validation(errors: dict[str, str]) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=errors)


def http_error(exc: RepositoryError) -> HTTPException:
    if isinstance(exc, RepositoryValidationError):
        return failed_validation(exc.errors)
    if isinstance(exc, RepositoryReferenceError):
        return failed_validation({exc.field: "does not exist"})
    return HTTPException(status_code=STATUS_BY_KIND[exc.kind], detail=str(exc))
