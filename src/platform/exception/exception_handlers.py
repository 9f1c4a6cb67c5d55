from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import record_error_on_span


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


async def booking_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Every engine error keeps its kind in the body so clients can tell a taken
    slot (refresh and pick again) from a rejected promo (edit the form).
    """
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc), 500)
    record_error_on_span(error)

    # Store outages: the caller owns the retry policy
    headers = (
        {'Retry-After': '1'} if error.status_code == status.HTTP_503_SERVICE_UNAVAILABLE else None
    )
    return JSONResponse(
        status_code=error.status_code,
        content={'detail': error.message, 'error': type(error).__name__},
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(error.errors()), 'error': 'InvalidSelection'},
    )


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': str(exc), 'error': 'InvalidSelection'},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.opt(exception=exc).error(
        f'💥 [HTTP] Unhandled error on {request.method} {request.url.path}'
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error', 'error': 'InternalError'},
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: booking_error_handler,
    RequestValidationError: request_validation_error_handler,
    ValueError: value_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
