# app/errors.py
"""
Error taxonomy and the single place where results become HTTP responses.

Guard, validator and store calls never raise for expected failures; they
return a Result holding either a value or one of the ApiError kinds below.
Route functions hand that Result to respond().
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def describe(self) -> Dict[str, Any]:
        return {"kind": type(self).__name__, "status": self.status_code, **self.details}


class ValidationError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class InternalError(ApiError):
    status_code = 500


class RouteError(ApiError):
    """Framework-level failures (unknown path, wrong method) keep their own status."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ApiError] = None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ApiError) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def then(self, fn: Callable[[Any], "Result"]) -> "Result":
        # failures pass through untouched
        if not self.ok:
            return self
        return fn(self.value)


def error_body(error: ApiError, expose_details: bool) -> Dict[str, Any]:
    return {
        "message": error.message,
        "error": error.describe() if expose_details else {},
    }


def error_response(error: ApiError, expose_details: bool) -> JSONResponse:
    if error.status_code >= 500:
        logger.error("%s: %s", type(error).__name__, error.message)
    else:
        logger.warning("%s: %s", type(error).__name__, error.message)
    return JSONResponse(status_code=error.status_code, content=error_body(error, expose_details))


def respond(result: Result, status_code: int = 200, expose_details: bool = False) -> Response:
    if not result.ok:
        return error_response(result.error, expose_details)
    if status_code == 204:
        return Response(status_code=204)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result.value))
