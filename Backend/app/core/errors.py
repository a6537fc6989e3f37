import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from http import HTTPStatus

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Base for errors that terminate a request with a JSON body of the form
    ``{"error": <category>, "message": <human readable>}``.
    """
    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, *, error: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.headers = headers

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class UnauthorizedError(ApiError):
    status_code = 401
    error = "Unauthorized"


class NotFoundError(ApiError):
    status_code = 404
    error = "Record not found"


class UnprocessableError(ApiError):
    status_code = 422
    error = "Validation failed"


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Validation failed", "message": _format_validation_errors(exc)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        category = HTTPStatus(exc.status_code).phrase
    except ValueError:
        category = "Error"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": category, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
