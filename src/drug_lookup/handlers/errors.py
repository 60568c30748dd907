"""Mapping from lookup error kinds to HTTP errors."""

from fastapi import HTTPException, status

from drug_lookup.errors import (
    DetailUnavailable,
    DrugLookupError,
    InvalidIdentifier,
    MedicationAlreadyExists,
    MedicationNotFound,
    NotFound,
    UpstreamUnavailable,
)

_STATUS_BY_ERROR: dict[type[DrugLookupError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    MedicationNotFound: status.HTTP_404_NOT_FOUND,
    UpstreamUnavailable: status.HTTP_502_BAD_GATEWAY,
    DetailUnavailable: status.HTTP_424_FAILED_DEPENDENCY,
    InvalidIdentifier: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MedicationAlreadyExists: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def to_http_exception(error: DrugLookupError) -> HTTPException:
    """Translate a lookup error into an HTTPException."""
    status_code = _STATUS_BY_ERROR.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=str(error))
