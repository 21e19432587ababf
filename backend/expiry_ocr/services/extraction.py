"""Label extraction service for OCR text from food packaging.

Combines the three extractors into one result:
1. Food name via fixed vocabulary lookup
2. Expiry date via ordered date patterns (first valid candidate wins)
3. A free-text note, only when no date was found
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .dates import find_expiry_date
from .food_names import match_food_name
from .notes import NoteSelector
from ..config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Fields extracted from one OCR text. Any field may be absent."""
    food_name: Optional[str] = None
    expiry_date: Optional[date] = None
    note: Optional[str] = None


class LabelExtractor:
    """Extracts food name, expiry date and note from raw OCR text."""

    def __init__(
        self,
        past_tolerance_days: Optional[int] = None,
        note_selector: Optional[NoteSelector] = None,
    ):
        self.settings = get_settings()
        self.past_tolerance_days = (
            past_tolerance_days if past_tolerance_days is not None
            else self.settings.past_tolerance_days
        )
        self.note_selector = note_selector or NoteSelector()

    def extract(self, text: str, today: Optional[date] = None) -> ExtractionResult:
        """
        Extract all fields from OCR text.

        Missing signals are reported as None fields, never as errors.

        Args:
            text: Raw OCR engine output
            today: Reference date for rejecting stale dates (defaults to today)

        Returns:
            ExtractionResult

        Raises:
            TypeError: If text is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"OCR text must be a string, got {type(text).__name__}")

        food_name = match_food_name(text)
        expiry_date = find_expiry_date(
            text,
            today=today,
            past_tolerance_days=self.past_tolerance_days,
        )

        # A parsed date is worth more than raw OCR noise
        note = None
        if expiry_date is None:
            note = self.note_selector.select_note(text, expiry_date, food_name)

        logger.debug(f"Extracted food_name={food_name!r} expiry_date={expiry_date} note={note!r}")

        return ExtractionResult(
            food_name=food_name,
            expiry_date=expiry_date,
            note=note,
        )


def extract_label(text: str, today: Optional[date] = None) -> ExtractionResult:
    """
    Standalone function to extract label fields from text.

    Args:
        text: Raw OCR text
        today: Reference date (defaults to today)

    Returns:
        ExtractionResult
    """
    return LabelExtractor().extract(text, today=today)
