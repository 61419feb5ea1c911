from uuid import UUID
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool
from logging import Logger
from typing import Any, Callable, Literal, TypeVar

from Hotels.errors import InventoryError, NotFoundError, PersistenceError, ValidationError

T = TypeVar("T")

entity_type : Literal['hotel', 'room', 'undefined_entity'] = 'undefined_entity'

def _error_detail(code: str, message: str) -> dict[str, str]:
    return {"error": code, "message": message}

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the same error shape as domain errors.
    The request source ("body", "path", ...) is left out of each field location.
    """

    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"][1:])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _error_detail("validation_error", "; ".join(messages))},
    )

def _parse_id(
        id: str,
        logger: Logger,
        entity: Literal['hotel', 'room', 'undefined_entity'] = entity_type
    ) -> UUID:
    """Validate and normalize a GUID identifier for any entity among:
    - hotel
    - room
    - undefined entity.
    """

    try:
        return UUID(id, version=4)
    except ValueError as exc:
        logger.warning(f"Invalid GUID supplied for {entity}_id", extra={f"{entity}_id": id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_detail("invalid_id", f"The supplied {entity} id is not a valid UUID4."),
        ) from exc

async def _run_operation(
        operation: Callable[..., T],
        *args: Any,
        logger: Logger,
        log_context: dict[str, Any],
    ) -> T:
    """Run a blocking catalog/inventory call and map domain errors to HTTP errors:
    - NotFoundError -> 404
    - ValidationError and its capacity/duplicate/reference kinds -> 422
    - PersistenceError -> 500
    """

    try:
        return await run_in_threadpool(operation, *args)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=_error_detail(exc.code, exc.message),
        ) from exc
    except ValidationError as exc:
        logger.info("Request rejected", extra={**log_context, "reason": exc.code})
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_error_detail(exc.code, exc.message),
        ) from exc
    except InventoryError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_detail(PersistenceError.code, exc.message),
        ) from exc
