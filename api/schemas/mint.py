from __future__ import annotations

from pydantic import BaseModel


class MintResponse(BaseModel):
    success: bool = True
    txHash: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    code: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    service: str
