from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from karibu.core.logger import get_logger

logger = get_logger("errors")


class Violation(BaseModel):
    """One field-level validation failure."""
    field: str
    message: str


# ==========================================
# ERROR TAXONOMY
# ==========================================

class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, violations: Sequence[Violation]):
        self.violations = list(violations)
        super().__init__(f"{len(self.violations)} invalid field(s)")


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized, no token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized to access this route"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Record not found"


class StorageUnavailable(AppError):
    """The database could not serve the request. The cause is chained, never exposed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"


# ==========================================
# RESPONSE MAPPING
# ==========================================

def _field_from_loc(loc: Sequence[Any]) -> str:
    # Decoder errors are located as ("body", <byte offset>)
    if len(loc) == 2 and loc[0] == "body" and isinstance(loc[1], int):
        return "body"
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts) if parts else "body"


def _errors_body(violations: List[Violation]) -> Dict[str, Any]:
    return {"errors": [v.model_dump() for v in violations]}


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    logger.info(
        "%s %s rejected: %s",
        request.method, request.url.path,
        ", ".join(v.field for v in exc.violations),
    )
    return JSONResponse(status_code=exc.status_code, content=_errors_body(exc.violations))


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    logger.error(
        "%s %s failed: storage unavailable",
        request.method, request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = [
        Violation(field=_field_from_loc(err.get("loc", ())), message=err.get("msg", "Invalid value"))
        for err in exc.errors()
    ]
    return await validation_failed_handler(request, ValidationFailed(violations))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = "Route not found"
    else:
        detail = exc.detail
    logger.info("%s %s -> %s", request.method, request.url.path, exc.status_code)
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette picks the handler of the closest class in the MRO
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
