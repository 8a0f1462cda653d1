"""Error Handlers: global exception handlers mapping failures to the error envelope.

Every failure gets a fresh correlation id that appears both in the response
body and in the server log line, so the two can be joined later. The
response never carries stack traces, SQL, or credentials.
"""

import logging
import uuid
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.application.schemas.error import ErrorDetail, ErrorResponse
from app.domain.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    FieldIssue,
    ForbiddenError,
    UnauthenticatedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(EntityNotFoundError, _not_found_handler)
    app.add_exception_handler(ValidationFailedError, _validation_failed_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(BusinessRuleViolationError, _business_rule_handler)
    app.add_exception_handler(ForbiddenError, _forbidden_handler)
    app.add_exception_handler(UnauthenticatedError, _unauthenticated_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unexpected_handler)


def new_correlation_id() -> str:
    return str(uuid.uuid4())


def error_response(
    status_code: int,
    code: str,
    message: str,
    correlation_id: str,
    details: list[FieldIssue] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        code=code,
        message=message,
        details=[ErrorDetail(field=d.field, issue=d.issue) for d in details] if details else None,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


async def _not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    correlation_id = new_correlation_id()
    logger.warning("Resource not found [correlationId=%s]: %s", correlation_id, exc.message)
    return error_response(
        status.HTTP_404_NOT_FOUND, "RESOURCE_NOT_FOUND", exc.message, correlation_id,
    )


async def _validation_failed_handler(
    request: Request, exc: ValidationFailedError,
) -> JSONResponse:
    correlation_id = new_correlation_id()
    logger.warning(
        "Validation error on %s [correlationId=%s]: %s",
        request.url.path, correlation_id, exc.message,
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", exc.message, correlation_id,
        details=exc.details,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    correlation_id = new_correlation_id()
    details = [_field_issue(error) for error in exc.errors()]
    logger.warning(
        "Validation error on %s [correlationId=%s]: %d field errors",
        request.url.path, correlation_id, len(details),
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Request validation failed",
        correlation_id, details=details,
    )


async def _business_rule_handler(
    request: Request, exc: BusinessRuleViolationError,
) -> JSONResponse:
    correlation_id = new_correlation_id()
    logger.warning("Business rule violation [correlationId=%s]: %s", correlation_id, exc.message)
    status_code = status.HTTP_409_CONFLICT if exc.conflict else status.HTTP_400_BAD_REQUEST
    return error_response(status_code, "BUSINESS_RULE_VIOLATION", exc.message, correlation_id)


async def _forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    correlation_id = new_correlation_id()
    logger.warning("Forbidden access [correlationId=%s]: %s", correlation_id, exc.message)
    return error_response(
        status.HTTP_403_FORBIDDEN, "FORBIDDEN", exc.message, correlation_id,
    )


async def _unauthenticated_handler(
    request: Request, exc: UnauthenticatedError,
) -> JSONResponse:
    correlation_id = new_correlation_id()
    logger.warning("Authentication failed [correlationId=%s]: %s", correlation_id, exc.message)
    return error_response(
        status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Authentication required",
        correlation_id, headers={"WWW-Authenticate": "Bearer"},
    )


_HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "RESOURCE_NOT_FOUND",
    status.HTTP_409_CONFLICT: "BUSINESS_RULE_VIOLATION",
}


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    """Router-level failures (unknown route, wrong method) in the same envelope."""
    correlation_id = new_correlation_id()
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    if exc.status_code >= 500:
        code = "INTERNAL_SERVER_ERROR"
    else:
        code = _HTTP_STATUS_CODES.get(exc.status_code, phrase.upper().replace(" ", "_"))
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else phrase
    logger.warning(
        "HTTP %d on %s %s [correlationId=%s]: %s",
        exc.status_code, request.method, request.url.path, correlation_id, message,
    )
    return error_response(
        exc.status_code, code, message, correlation_id, headers=getattr(exc, "headers", None),
    )


async def _unexpected_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all, never leaks internal details."""
    correlation_id = new_correlation_id()
    logger.error(
        "Unexpected error on %s [correlationId=%s]: %s",
        request.url.path, correlation_id, exc,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please contact support with correlation ID: "
        f"{correlation_id}",
        correlation_id,
    )


def _field_issue(error: dict) -> FieldIssue:
    # Drop the "body"/"query"/"path" prefix FastAPI puts first in ``loc``.
    loc = [str(part) for part in error.get("loc", ())]
    if len(loc) > 1 and loc[0] in {"body", "query", "path", "header"}:
        loc = loc[1:]
    return FieldIssue(field=".".join(loc) or "request", issue=error.get("msg", "invalid"))
