"""Pydantic schemas for API requests and responses."""

from datetime import date
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


class ExpiryStatus(str, Enum):
    """Urgency of an extracted expiry date."""
    FRESH = "fresh"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    EXPIRED = "expired"


class ExtractionRequest(BaseModel):
    """Raw OCR text to extract fields from."""
    text: str = Field(..., description="Verbatim OCR engine output")

    class Config:
        json_schema_extra = {
            "example": {
                "text": "明治ブルガリアヨーグルト\n賞味期限 2025.9.12\n要冷蔵10℃以下"
            }
        }


class ExtractedFields(BaseModel):
    """Fields extracted from OCR text. The registration form may override any of them."""
    food_name: Optional[str] = None
    food_category: Optional[str] = None
    expiry_date: Optional[date] = None
    note: Optional[str] = Field(None, description="Residual text hint, only when no date was found")
    days_remaining: Optional[int] = None
    expiry_status: Optional[ExpiryStatus] = None
    expiry_message: Optional[str] = None
    raw_text: str

    class Config:
        json_schema_extra = {
            "example": {
                "food_name": "ヨーグルト",
                "food_category": "dairy",
                "expiry_date": "2025-09-12",
                "note": None,
                "days_remaining": 5,
                "expiry_status": "good",
                "expiry_message": "期限: 2025/9/12 (あと5日)",
                "raw_text": "明治ブルガリアヨーグルト\n賞味期限 2025.9.12"
            }
        }


class ExtractionResponse(BaseModel):
    """Response for single text extraction."""
    success: bool
    extracted: Optional[ExtractedFields] = None
    error: Optional[str] = None
    processing_time_ms: int = 0


class BatchRowResult(BaseModel):
    """Result for a single row in batch extraction."""
    item_id: str
    success: bool
    extracted: Optional[ExtractedFields] = None
    error: Optional[str] = None


class BatchRowError(BaseModel):
    """Validation problem with a CSV row."""
    row_number: int
    field: str
    message: str


class BatchExtractionResponse(BaseModel):
    """Response for batch extraction."""
    success: bool
    total: int
    processed: int
    with_date: int
    with_food_name: int
    failed: int
    results: list[BatchRowResult]
    errors: list[BatchRowError] = []
    processing_time_ms: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Text too long",
                "detail": "Maximum length is 20000 characters"
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
