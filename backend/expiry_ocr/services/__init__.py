"""Services for date parsing, food name matching, note selection, extraction, and batch processing."""

from .dates import (
    DateCandidate,
    PatternKind,
    parse_date_candidates,
    validate_candidate,
    find_expiry_date,
)
from .food_names import match_food_name, food_category
from .notes import NoteSelector, select_note
from .extraction import LabelExtractor, ExtractionResult, extract_label
from .expiry import ExpiryStatus, ExpiryInfo, classify_expiry, days_until_expiry, expiry_message
from .batch import CSVParser, CSVRow, CSVValidationError, SequentialBatchProcessor

__all__ = [
    "DateCandidate",
    "PatternKind",
    "parse_date_candidates",
    "validate_candidate",
    "find_expiry_date",
    "match_food_name",
    "food_category",
    "NoteSelector",
    "select_note",
    "LabelExtractor",
    "ExtractionResult",
    "extract_label",
    "ExpiryStatus",
    "ExpiryInfo",
    "classify_expiry",
    "days_until_expiry",
    "expiry_message",
    "CSVParser",
    "CSVRow",
    "CSVValidationError",
    "SequentialBatchProcessor",
]
