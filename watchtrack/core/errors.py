import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pymongo.errors import ConnectionFailure
from redis.exceptions import ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        metadata: Dict[str, Any] = None
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "message": detail,
                "error_code": error_code or "UNKNOWN_ERROR",
                "metadata": metadata or {}
            }
        )

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def error_code(self) -> str:
        return self.detail["error_code"]

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.detail["metadata"]


class AuthenticationError(APIError):
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="AUTHENTICATION_FAILED"
        )
        self.headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(APIError):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="NOT_AUTHORIZED"
        )


class ValidationError(APIError):
    def __init__(self, detail: str = "Validation failed", errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_FAILED",
            metadata={"errors": errors or []}
        )

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(f"Invalid {field}", errors=[{"field": field, "message": message}])


class NotFoundError(APIError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} with id {resource_id} not found",
            error_code="RESOURCE_NOT_FOUND",
            metadata={"resource": resource, "id": resource_id}
        )


class ConflictError(APIError):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class DependencyError(APIError):
    def __init__(self, dependency: str, detail: str = None):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail or f"{dependency} is unavailable, please retry",
            error_code="DEPENDENCY_UNAVAILABLE",
            metadata={"dependency": dependency, "retryable": True}
        )


def error_body(message: str, error_code: str, errors: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    body = {"success": False, "message": message, "error_code": error_code}
    if errors:
        body["errors"] = errors
    return body


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_code, exc.metadata.get("errors")),
        headers=getattr(exc, "headers", None)
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, "HTTP_ERROR"),
        headers=getattr(exc, "headers", None)
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query" prefix FastAPI puts on every location
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location) or "request",
            "message": err.get("msg", "Invalid value")
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Validation failed", "VALIDATION_FAILED", errors)
    )


async def dependency_failure_handler(request: Request, exc: Exception) -> JSONResponse:
    dependency = "Redis" if isinstance(exc, RedisConnectionError) else "MongoDB"
    logger.error(f"{dependency} unreachable during {request.method} {request.url.path}: {str(exc)}")
    return await api_error_handler(request, DependencyError(dependency))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR")
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ConnectionFailure, dependency_failure_handler)
    app.add_exception_handler(RedisConnectionError, dependency_failure_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
