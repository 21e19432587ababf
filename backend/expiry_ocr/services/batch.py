"""Batch processing service for extracting many OCR texts at once."""

import csv
import io
import time
import logging
from typing import Dict, List, Tuple, Optional, Any
from dataclasses import dataclass
from datetime import date

from .extraction import LabelExtractor

logger = logging.getLogger(__name__)


@dataclass
class CSVRow:
    """Parsed and validated CSV row."""
    item_id: str
    ocr_text: str
    row_number: int = 0


@dataclass
class CSVValidationError:
    """Error from CSV validation."""
    row_number: int
    field: str
    message: str


class CSVParser:
    """Parse and validate batch CSV files."""

    # Required columns
    REQUIRED_COLUMNS = {"item_id", "ocr_text"}

    def parse(self, csv_content: str) -> Tuple[List[CSVRow], List[CSVValidationError]]:
        """
        Parse CSV content and return validated rows.

        OCR text cells may span several lines when quoted.

        Args:
            csv_content: CSV file content as string

        Returns:
            Tuple of (valid_rows, errors)
        """
        rows: List[CSVRow] = []
        errors: List[CSVValidationError] = []

        try:
            reader = csv.DictReader(io.StringIO(csv_content))

            if reader.fieldnames is None:
                errors.append(CSVValidationError(
                    row_number=0,
                    field="header",
                    message="CSV file is empty or has no header"
                ))
                return rows, errors

            # Normalize column names (lowercase, strip whitespace)
            fieldnames = [f.lower().strip() for f in reader.fieldnames]

            missing_required = self.REQUIRED_COLUMNS - set(fieldnames)
            if missing_required:
                errors.append(CSVValidationError(
                    row_number=0,
                    field="header",
                    message=f"Missing required columns: {', '.join(sorted(missing_required))}"
                ))
                return rows, errors

            # Warn about unknown columns (but don't fail)
            unknown_columns = set(fieldnames) - self.REQUIRED_COLUMNS
            if unknown_columns:
                logger.warning(f"Unknown CSV columns will be ignored: {unknown_columns}")

            seen_ids = set()

            # Start at 2 (1-indexed + header); quoted multi-line cells make
            # this the logical row number rather than the file line
            for row_num, row in enumerate(reader, start=2):
                normalized_row = {(k or "").lower().strip(): v for k, v in row.items()}

                item_id = (normalized_row.get("item_id") or "").strip()
                if not item_id:
                    errors.append(CSVValidationError(
                        row_number=row_num,
                        field="item_id",
                        message="Item ID is required"
                    ))
                    continue

                if item_id in seen_ids:
                    errors.append(CSVValidationError(
                        row_number=row_num,
                        field="item_id",
                        message=f"Duplicate item ID: '{item_id}'"
                    ))
                    continue

                # Keep the OCR text verbatim (line breaks are meaningful)
                ocr_text = normalized_row.get("ocr_text") or ""
                if not ocr_text.strip():
                    errors.append(CSVValidationError(
                        row_number=row_num,
                        field="ocr_text",
                        message="OCR text is required"
                    ))
                    continue

                seen_ids.add(item_id)
                rows.append(CSVRow(
                    item_id=item_id,
                    ocr_text=ocr_text,
                    row_number=row_num
                ))

        except csv.Error as e:
            errors.append(CSVValidationError(
                row_number=0,
                field="csv",
                message=f"CSV parsing error: {str(e)}"
            ))

        return rows, errors


class SequentialBatchProcessor:
    """
    Process a batch sequentially with a shared extractor.

    Extraction is pure regex work on short strings, so there is nothing
    to gain from worker processes.
    """

    def process_batch(
        self,
        csv_rows: List[CSVRow],
        extractor: LabelExtractor,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """
        Extract every row in CSV order.

        Args:
            csv_rows: Validated rows
            extractor: Shared label extractor instance
            today: Reference date for stale-date rejection

        Returns:
            List of result dicts with item_id, success, error, result
            and processing_time_ms
        """
        results = []

        for row in csv_rows:
            start_time = time.time()

            try:
                extraction = extractor.extract(row.ocr_text, today=today)
            except Exception as e:
                logger.exception(f"Error processing {row.item_id}: {e}")
                results.append({
                    "item_id": row.item_id,
                    "success": False,
                    "error": f"Processing error: {str(e)}",
                    "result": None,
                    "processing_time_ms": int((time.time() - start_time) * 1000),
                })
                continue

            results.append({
                "item_id": row.item_id,
                "success": True,
                "error": None,
                "result": extraction,
                "processing_time_ms": int((time.time() - start_time) * 1000),
            })

        return results
