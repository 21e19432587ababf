"""API route definitions."""

import time
from datetime import date
from fastapi import APIRouter, UploadFile, File, HTTPException
from typing import Optional
import logging

from ..models import (
    ExpiryStatus,
    ExtractionRequest,
    ExtractedFields,
    ExtractionResponse,
    ErrorResponse,
    HealthResponse,
    BatchExtractionResponse,
    BatchRowResult,
    BatchRowError,
)
from ..services import (
    LabelExtractor,
    ExtractionResult,
    CSVParser,
    SequentialBatchProcessor,
    food_category,
    classify_expiry,
    expiry_message,
)
from ..config import get_settings
from .. import __version__

logger = logging.getLogger(__name__)
router = APIRouter()

# Initialize services
label_extractor = LabelExtractor()
csv_parser = CSVParser()
batch_processor = SequentialBatchProcessor()


def to_extracted_fields(
    result: ExtractionResult,
    raw_text: str,
    today: Optional[date] = None,
) -> ExtractedFields:
    """Build the response model, adding category and urgency information."""
    days_remaining = None
    status = None
    message = None
    if result.expiry_date is not None:
        info = classify_expiry(result.expiry_date, today)
        days_remaining = info.days_remaining
        status = ExpiryStatus(info.status.value)
        message = expiry_message(info, result.expiry_date)

    return ExtractedFields(
        food_name=result.food_name,
        food_category=food_category(result.food_name),
        expiry_date=result.expiry_date,
        note=result.note,
        days_remaining=days_remaining,
        expiry_status=status,
        expiry_message=message,
        raw_text=raw_text,
    )


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health."""
    return HealthResponse(
        status="healthy",
        version=__version__,
    )


@router.post(
    "/extract",
    response_model=ExtractionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    tags=["Extraction"]
)
async def extract_text(request: ExtractionRequest):
    """
    Extract food name, expiry date and note from OCR text.

    Fields that could not be found are returned as null.
    """
    start_time = time.time()
    settings = get_settings()

    if len(request.text) > settings.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"Text too long. Maximum length is {settings.max_text_length} characters."
        )

    try:
        today = date.today()
        result = label_extractor.extract(request.text, today=today)
        extracted = to_extracted_fields(result, request.text, today)
    except Exception as e:
        logger.exception(f"Error extracting text: {e}")
        return ExtractionResponse(
            success=False,
            error=f"Error extracting text: {str(e)}"
        )

    total_time = int((time.time() - start_time) * 1000)
    logger.info(
        f"Extraction done ({total_time}ms): food_name={result.food_name!r} "
        f"expiry_date={result.expiry_date} note={'yes' if result.note else 'no'}"
    )

    return ExtractionResponse(
        success=True,
        extracted=extracted,
        error=None,
        processing_time_ms=total_time
    )


@router.post(
    "/extract/batch",
    response_model=BatchExtractionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Processing error"}
    },
    tags=["Extraction"]
)
async def extract_batch(
    csv_file: UploadFile = File(..., description="CSV file with item_id and ocr_text columns"),
):
    """
    Extract fields from many OCR texts uploaded as CSV.

    CSV format:
    - Required columns: item_id, ocr_text
    - Quote ocr_text cells that contain line breaks

    Example CSV:
    ```
    item_id,ocr_text
    a1,"ヨーグルト
    賞味期限 2025.9.12"
    a2,牛乳 25.10.3
    ```

    Returns one result per valid row, in CSV order.
    """
    start_time = time.time()
    settings = get_settings()

    try:
        csv_content = (await csv_file.read()).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400,
            detail="CSV file must be UTF-8 encoded"
        )
    except Exception as e:
        logger.error(f"Failed to read CSV file: {e}")
        raise HTTPException(status_code=400, detail="Failed to read CSV file")

    csv_rows, csv_errors = csv_parser.parse(csv_content)

    if not csv_rows:
        error_messages = [f"Row {e.row_number}: {e.field} - {e.message}" for e in csv_errors[:5]]
        raise HTTPException(
            status_code=400,
            detail=f"CSV validation failed: {'; '.join(error_messages) or 'no rows'}"
        )

    if len(csv_rows) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Too many rows. Maximum batch size is {settings.max_batch_size} rows."
        )

    for row in csv_rows:
        if len(row.ocr_text) > settings.max_text_length:
            raise HTTPException(
                status_code=400,
                detail=f"Row {row.row_number}: text too long. Maximum length is {settings.max_text_length} characters."
            )

    today = date.today()
    try:
        results = batch_processor.process_batch(
            csv_rows=csv_rows,
            extractor=label_extractor,
            today=today,
        )
    except Exception as e:
        logger.exception(f"Batch processing error: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Batch processing failed: {str(e)}"
        )

    texts = {row.item_id: row.ocr_text for row in csv_rows}
    batch_results = []
    with_date = 0
    with_food_name = 0
    failed = 0

    for r in results:
        if r["success"]:
            extraction = r["result"]
            if extraction.expiry_date is not None:
                with_date += 1
            if extraction.food_name is not None:
                with_food_name += 1
            batch_results.append(BatchRowResult(
                item_id=r["item_id"],
                success=True,
                extracted=to_extracted_fields(extraction, texts[r["item_id"]], today),
            ))
        else:
            failed += 1
            batch_results.append(BatchRowResult(
                item_id=r["item_id"],
                success=False,
                error=r.get("error", "Unknown error"),
            ))

    processing_time = int((time.time() - start_time) * 1000)
    logger.info(f"Batch extraction done: {len(results)} rows, {with_date} with date ({processing_time}ms)")

    return BatchExtractionResponse(
        success=True,
        total=len(csv_rows),
        processed=len(results),
        with_date=with_date,
        with_food_name=with_food_name,
        failed=failed,
        results=batch_results,
        errors=[
            BatchRowError(row_number=e.row_number, field=e.field, message=e.message)
            for e in csv_errors
        ],
        processing_time_ms=processing_time
    )
