# src/narrative/api/responses.py
"""
Standardized API Response Models

Provides consistent response envelopes for all API endpoints:
- Standard success/error structure
- Error code standards and their HTTP statuses
- Conversion of engine OperationResults into responses

All API endpoints should use these helpers for consistency.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..core.results import OperationResult


# -------------------------
# Error Codes
# -------------------------

class ErrorCode(str, Enum):
    """
    Standardized error codes for API responses.
    Engine codes share their names with EngineErrorCode.
    """
    # Validation errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Resource errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    MARKER_INACTIVE = "MARKER_INACTIVE"

    # Server errors (5xx)
    WRITE_FAILED = "WRITE_FAILED"


# -------------------------
# HTTP Status Mappings
# -------------------------

ERROR_CODE_TO_HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 422,

    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_TRANSITION: 409,
    ErrorCode.MARKER_INACTIVE: 409,

    ErrorCode.WRITE_FAILED: 500,
}


def get_http_status(error_code: ErrorCode) -> int:
    """Get HTTP status code for an error code."""
    return ERROR_CODE_TO_HTTP_STATUS.get(error_code, 500)


# -------------------------
# Response Metadata
# -------------------------

def _now() -> datetime:
    return datetime.now(timezone.utc)


class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""
    timestamp: datetime = Field(default_factory=_now)
    request_id: Optional[str] = None
    version: str = "1.0"


class ErrorDetail(BaseModel):
    """Detailed error information."""
    code: ErrorCode
    message: str
    detail: Optional[str] = None


# -------------------------
# Generic Response Models
# -------------------------

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """
    Standard API response envelope.

    {
        "success": true,
        "data": { ... },
        "meta": { "timestamp": "...", "version": "1.0" }
    }
    """
    success: bool = True
    data: Optional[T] = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


class APIErrorResponse(BaseModel):
    """
    Standard error response envelope.

    {
        "success": false,
        "error": {
            "code": "INVALID_TRANSITION",
            "message": "Cannot advance a paused engagement"
        },
        "meta": { "timestamp": "...", "version": "1.0" }
    }
    """
    success: bool = False
    error: ErrorDetail
    meta: ResponseMeta = Field(default_factory=ResponseMeta)


# -------------------------
# Response Helpers
# -------------------------

def success_response(
    data: Any = None,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Create a standard success response dict."""
    return APIResponse(
        data=data,
        meta=ResponseMeta(request_id=request_id)
    ).model_dump(mode="json")


def error_response(
    code: ErrorCode,
    message: str,
    detail: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a standard error response dict."""
    return APIErrorResponse(
        error=ErrorDetail(code=code, message=message, detail=detail)
    ).model_dump(mode="json")


def result_response(
    result: OperationResult,
    serialize=None,
    status_code: int = 200,
) -> JSONResponse:
    """
    Turn an engine OperationResult into a JSONResponse.

    ``serialize`` converts the success value (defaults to ``value.to_dict()``).
    """
    if not result.ok:
        code = ErrorCode(result.error.value)
        return JSONResponse(
            status_code=get_http_status(code),
            content=error_response(code=code, message=result.message),
        )
    value = result.value
    if serialize is not None:
        data = serialize(value)
    else:
        data = value.to_dict() if hasattr(value, "to_dict") else value
    return JSONResponse(status_code=status_code, content=success_response(data))


# -------------------------
# FastAPI Exception Classes
# -------------------------

class APIException(HTTPException):
    """
    Custom API exception with structured error response.

    Usage:
        raise APIException(
            error_code=ErrorCode.NOT_FOUND,
            message="Marker not found",
            detail="No marker with id=123"
        )
    """
    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.error_detail = detail

        status_code = get_http_status(error_code)
        super().__init__(status_code=status_code, detail=message, headers=headers)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse for exception handlers."""
        return JSONResponse(
            status_code=self.status_code,
            content=error_response(
                code=self.error_code,
                message=self.message,
                detail=self.error_detail,
            )
        )


def raise_validation_error(message: str = "Validation failed", detail: Optional[str] = None):
    """Raise a validation error exception."""
    raise APIException(
        error_code=ErrorCode.VALIDATION_ERROR,
        message=message,
        detail=detail,
    )


__all__: List[str] = [
    "APIErrorResponse",
    "APIException",
    "APIResponse",
    "ERROR_CODE_TO_HTTP_STATUS",
    "ErrorCode",
    "ErrorDetail",
    "ResponseMeta",
    "error_response",
    "get_http_status",
    "raise_validation_error",
    "result_response",
    "success_response",
]
