from fastapi import HTTPException

from intake.jobs.errors import IntakeError, InvalidStateError, NotFoundError


def http_error_from_intake(err: IntakeError) -> HTTPException:
    if isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, InvalidStateError):
        status = 409
    else:
        status = 500

    return HTTPException(
        status_code=status,
        detail={"code": err.code, "message": err.message},
    )
