# app/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Optional


class ApiResponse(BaseModel):
    success: bool
    statusCode: int
    message: str
    data: Optional[Any] = None
    token: Optional[str] = None
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
    database: str
