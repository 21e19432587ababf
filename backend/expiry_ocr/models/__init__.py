"""Pydantic models for request/response schemas."""

from .schemas import (
    ExpiryStatus,
    ExtractionRequest,
    ExtractedFields,
    ExtractionResponse,
    BatchRowResult,
    BatchRowError,
    BatchExtractionResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "ExpiryStatus",
    "ExtractionRequest",
    "ExtractedFields",
    "ExtractionResponse",
    "BatchRowResult",
    "BatchRowError",
    "BatchExtractionResponse",
    "ErrorResponse",
    "HealthResponse",
]
