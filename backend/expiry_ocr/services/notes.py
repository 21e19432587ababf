"""Free-text note selection for labels where no expiry date was found.

The note is a short hint built from whatever OCR lines are left after
discarding text that is known to be irrelevant on food packaging:
manufacturer details, prices, nutrition facts, barcodes and so on.
The exclusion list is best-effort noise filtering, not an allowlist.
"""

import re
import logging
from datetime import date
from typing import List, Optional, Tuple

from .dates import compact_text, normalize_text, parse_date_candidates
from ..config import get_settings

logger = logging.getLogger(__name__)


# (category, pattern) - a line matching any of these is dropped.
# Lines are NFKC-normalized first, so only half-width forms are listed.
EXCLUSION_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("digits", re.compile(r"^[\d\s]+$")),
    # Product codes such as "ABCDE"
    ("product_code", re.compile(r"^[A-Z]+$")),
    ("manufacturing_date", re.compile(r"製造|加工日|包装日|\bMF[GD]\b", re.IGNORECASE)),
    ("company", re.compile(
        r"株式会社|有限会社|\(株\)|\(有\)|販売者|販売元|製造者|製造所|加工者|輸入者|"
        r"お客様相談|\bCo\.|\bInc\b|\bLtd\b|\bCorp\b",
        re.IGNORECASE,
    )),
    ("storage", re.compile(
        r"保存|要冷蔵|冷蔵|冷凍|常温|直射日光|高温多湿|開封後|°C|℃",
        re.IGNORECASE,
    )),
    ("nutrition", re.compile(
        r"栄養成分|エネルギー|たんぱく質|タンパク質|脂質|炭水化物|糖質|食物繊維|"
        r"食塩相当量|ナトリウム|カルシウム|カロリー|kcal",
        re.IGNORECASE,
    )),
    ("quantity", re.compile(
        r"内容量|正味|容量|\d+(?:\.\d+)?\s*(?:kg|g|ml|l|個|枚|本|切れ|パック|入)(?![a-z])",
        re.IGNORECASE,
    )),
    ("price", re.compile(r"円|¥|\$\s*\d|税込|税抜|本体価格|価格|売価")),
    ("url", re.compile(r"https?://|www\.|\.com\b|\.co\.jp\b|\.jp\b", re.IGNORECASE)),
    ("barcode", re.compile(r"(?<!\d)\d{13}(?!\d)")),
    ("code_8", re.compile(r"(?<!\d)\d{8}(?!\d)")),
    # An expiry label with no usable date next to it is noise
    ("expiry_label", re.compile(
        r"賞味期限|消費期限|期限|best\s*before|use\s*by|\bexp(?:iry|iration|\.)?\b|\bBB\b",
        re.IGNORECASE,
    )),
)

_WHITESPACE = re.compile(r"\s+")


def exclusion_category(line: str) -> Optional[str]:
    """Name of the first exclusion category the line falls into, if any."""
    for category, pattern in EXCLUSION_PATTERNS:
        if pattern.search(line):
            return category
    return None


def _has_date(line: str) -> bool:
    return next(parse_date_candidates(line), None) is not None


class NoteSelector:
    """Builds the free-text note from residual OCR lines."""

    def __init__(
        self,
        max_lines: Optional[int] = None,
        fallback_max_lines: Optional[int] = None,
        min_line_length: Optional[int] = None,
        max_line_length: Optional[int] = None,
        min_note_length: Optional[int] = None,
        separator: Optional[str] = None,
    ):
        settings = get_settings()
        self.max_lines = max_lines if max_lines is not None else settings.note_max_lines
        self.fallback_max_lines = (
            fallback_max_lines if fallback_max_lines is not None else settings.note_fallback_max_lines
        )
        self.min_line_length = min_line_length if min_line_length is not None else settings.note_min_line_length
        self.max_line_length = max_line_length if max_line_length is not None else settings.note_max_line_length
        self.min_note_length = min_note_length if min_note_length is not None else settings.note_min_length
        self.separator = separator if separator is not None else settings.note_separator

    def candidate_lines(self, text: str) -> List[str]:
        """
        Split text into lines and drop excluded and badly sized ones.

        Lines are NFKC-normalized and have runs of whitespace collapsed.
        """
        lines = []
        for raw_line in text.splitlines():
            line = _WHITESPACE.sub(" ", normalize_text(raw_line)).strip()
            if not line:
                continue

            category = exclusion_category(line)
            if category:
                logger.debug(f"Note line dropped ({category}): '{line}'")
                continue

            if len(line) < self.min_line_length or len(line) > self.max_line_length:
                logger.debug(f"Note line dropped (length {len(line)}): '{line}'")
                continue

            lines.append(line)
        return lines

    def select_note(
        self,
        text: str,
        found_date: Optional[date] = None,
        found_food_name: Optional[str] = None,
    ) -> Optional[str]:
        """
        Build a note from the relevant lines of text.

        Args:
            text: Raw OCR text
            found_date: Expiry date already extracted; a note is only built without one
            found_food_name: Food name already extracted, kept out of the note

        Returns:
            Up to max_lines lines joined by the separator, or None when
            nothing useful is left
        """
        if found_date is not None:
            return None

        lines = self.candidate_lines(text)

        if found_food_name:
            kept = []
            for line in lines:
                if _has_date(line):
                    logger.debug(f"Note line dropped (date-like): '{line}'")
                    continue
                if found_food_name in compact_text(line):
                    continue
                kept.append(line)
            selected = kept[:self.max_lines]
        else:
            selected = lines[:self.fallback_max_lines]

        note = self.separator.join(selected)
        if len(note) > self.min_note_length:
            return note
        return None


def select_note(
    text: str,
    found_date: Optional[date] = None,
    found_food_name: Optional[str] = None,
) -> Optional[str]:
    """Standalone note selection with configured defaults."""
    return NoteSelector().select_note(text, found_date, found_food_name)
