import logging

from fastapi import HTTPException

from ..services.record_store import (
    RecordNotFoundError,
    RecordValidationError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

STORE_ERRORS = (RecordNotFoundError, RecordValidationError, StorageUnavailableError)


def store_http_error(exc: Exception, not_found: str = "NOT_FOUND") -> HTTPException:
    """Translate a record store error into its HTTP condition."""
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=not_found)
    if isinstance(exc, RecordValidationError):
        logger.info(f"RECORD_INVALID: {len(exc.issues)} issue(s)")
        return HTTPException(status_code=422, detail="RECORD_INVALID")
    logger.error(f"STORAGE_UNAVAILABLE: {exc}")
    return HTTPException(status_code=503, detail="STORAGE_UNAVAILABLE")
