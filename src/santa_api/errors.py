"""Error handling for the FastAPI application and exchange workflow exceptions."""

import pydantic
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from santa_api.monitoring.logger import log_response_info
from santa_api.workflow.exceptions import WorkflowError

__all__ = [
    "handle_broad_exceptions",
    "handle_pydantic_validation_errors",
    "handle_request_validation_errors",
    "handle_workflow_errors",
]


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = {"detail": "Internal server error", "error_type": type(err).__name__}

        logger.opt(exception=err).error(
            f"Unhandled exception: {type(err).__name__}: {str(err)}",
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
        )

        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )
        log_response_info(response)
        return response


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Echoes field locations and messages only; the rejected input may be a
    wish or an address and is not returned or logged.
    """
    errors = exc.errors()
    error_response = {
        "detail": [
            {
                "loc": list(error.get("loc", ())),
                "msg": error["msg"],
            }
            for error in errors
        ],
        "error_type": "ValidationError",
    }

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        http_status=422,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type="ValidationError",
        validation_errors=error_response["detail"],
    )

    response = JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response,
    )
    log_response_info(response)

    return response


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Same response shape for FastAPI's request-body validation failures."""
    return await handle_pydantic_validation_errors(request, exc)


async def handle_workflow_errors(request: Request, exc: WorkflowError) -> JSONResponse:
    """
    Convert exchange workflow errors to HTTP responses.

    Each WorkflowError subclass carries its own status code:
    - InvalidRequest -> 400
    - Unauthorized -> 401
    - Forbidden -> 403
    - NotFound -> 404
    - Conflict / NotReady -> 409
    - TransitionNotImplemented -> 501
    - InternalError / CodecError -> 500
    """
    error_type = type(exc).__name__
    http_status = exc.http_status
    error_response = {"detail": exc.message, "error_type": error_type}

    log = logger.error if http_status >= 500 else logger.warning
    log(
        f"Workflow error: {error_type}: {exc.message}",
        http_status=http_status,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type=error_type,
    )

    headers = {"WWW-Authenticate": "Bearer"} if http_status == status.HTTP_401_UNAUTHORIZED else None
    response = JSONResponse(status_code=http_status, content=error_response, headers=headers)
    log_response_info(response)
    return response
