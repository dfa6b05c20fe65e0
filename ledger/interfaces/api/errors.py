# ledger/interfaces/api/errors.py
from fastapi import HTTPException

from ledger.domain.errors import ErrorKind, LedgerError, Result

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERMISSION: 403,
    ErrorKind.INVARIANT_VIOLATION: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORE: 503,
}


def to_http_exception(error: LedgerError) -> HTTPException:
    # Only kind and message leave the process; context may hold account ids.
    return HTTPException(
        status_code=_STATUS_BY_KIND[error.kind],
        detail={"kind": error.kind.value, "message": error.message},
    )


def unwrap(result: Result) -> object:
    if result.error is not None:
        raise to_http_exception(result.error)
    return result.value
