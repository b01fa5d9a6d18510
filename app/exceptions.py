from fastapi import HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
import logging

from .core.config import settings

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str, details: Optional[str] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.details = details


def create_error_response(message: str, status_code: int = 400, details: Optional[str] = None) -> Dict[str, Any]:
    """Create a standardized error response"""
    body: Dict[str, Any] = {
        "success": False,
        "statusCode": status_code,
        "message": message,
    }
    if details:
        body["details"] = details
    return body


def create_success_response(message: str, status_code: int = 200, data: Any = None, token: Optional[str] = None) -> Dict[str, Any]:
    """Create a standardized success response"""
    body: Dict[str, Any] = {
        "success": True,
        "statusCode": status_code,
        "message": message,
    }
    if data is not None:
        body["data"] = data
    if token is not None:
        body["token"] = token
    return body


def error_json(message: str, status_code: int, details: Optional[str] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=create_error_response(message, status_code, details))


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        parts.append(f"{'.'.join(loc) or 'body'}: {err.get('msg')}")
    return ", ".join(parts)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return error_json(str(exc.detail), exc.status_code, getattr(exc, "details", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_json("Validation failed", 400, format_validation_errors(exc.errors()))

