"""Expiry date extraction from raw OCR text.

Candidates are produced lazily by an ordered table of patterns. The table
order is the tie-break policy: the first candidate that validates wins.

1. Full numeric date   2025.9.12 / 25/9/12 / 2025-09-12 / 2025年9月12日
2. 8-digit run         20250912
3. 6-digit run         250912
4. Year-month only     2025.9 / 2025年9月  (day = end of month)
5. Reiwa era           令和7年9月12日 / 令和7年9月 / R7.9.12
6. Space separated     2025 9 12 / 2025 9

Patterns 1-5 run on the text with whitespace removed inside each line, pattern
6 on the text with whitespace kept.
"""

import calendar
import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Iterator, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

# 令和1年 = 2019
REIWA_OFFSET = 2018

# Common OCR letter/digit confusions
_DIGIT_CONFUSIONS = str.maketrans({"O": "0", "o": "0", "I": "1", "l": "1"})

# Whitespace other than line breaks
_INLINE_WHITESPACE = re.compile(r"[^\S\n]+")

# Separators after the year and after the month
_SEP_Y = r"[./\-年]"
_SEP_M = r"[./\-月]"


class PatternKind(str, Enum):
    """Which date pattern produced a candidate."""
    FULL_DATE = "full_date"
    DIGITS_8 = "digits_8"
    DIGITS_6 = "digits_6"
    YEAR_MONTH = "year_month"
    ERA = "era"
    SPACED = "spaced"


@dataclass(frozen=True)
class DateCandidate:
    """A syntactically matched, not yet validated, date."""
    year: int
    month: int
    day: Optional[int]  # None when the pattern carried no day
    kind: PatternKind
    matched: str

    @property
    def day_inferred(self) -> bool:
        return self.day is None


def normalize_text(text: str) -> str:
    """NFKC-fold full-width digits/punctuation, half-width kana and ㋿."""
    return unicodedata.normalize("NFKC", text)


def normalize_ocr_digits(text: str) -> str:
    """
    Prepare text for date matching.

    Applies NFKC folding, then maps letters OCR commonly confuses with
    digits: O/o -> 0, I/l -> 1.
    """
    return normalize_text(text).translate(_DIGIT_CONFUSIONS)


def compact_text(text: str) -> str:
    """Remove whitespace within each line.

    Line breaks are kept, so digits ending one line never run into digits
    starting the next. Blank lines are dropped.
    """
    lines = _INLINE_WHITESPACE.sub("", text).splitlines()
    return "\n".join(line for line in lines if line)


# =============================================================================
# PATTERN TABLE
# =============================================================================

def _ymd(match: re.Match) -> Tuple[int, int, Optional[int]]:
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def _ym(match: re.Match) -> Tuple[int, int, Optional[int]]:
    return int(match.group(1)), int(match.group(2)), None


def _reiwa_year(token: str) -> int:
    # 令和元年 is the first year of the era
    return (1 if token == "元" else int(token)) + REIWA_OFFSET


def _era_ymd(match: re.Match) -> Tuple[int, int, Optional[int]]:
    return _reiwa_year(match.group(1)), int(match.group(2)), int(match.group(3))


def _era_ym(match: re.Match) -> Tuple[int, int, Optional[int]]:
    return _reiwa_year(match.group(1)), int(match.group(2)), None


class DatePattern(NamedTuple):
    kind: PatternKind
    regex: "re.Pattern[str]"
    interpret: Callable[[re.Match], Tuple[int, int, Optional[int]]]
    compact: bool  # True: match against whitespace-stripped text


# Order matters - fully specified before year-month, explicit notation
# before bare digit runs, 8 digits before 6.
DATE_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern(
        PatternKind.FULL_DATE,
        # Not inside a longer digit run, and not right after "R"/"和" so era
        # dates are left to the era patterns
        re.compile(rf"(?<![\dR和])(\d{{4}}|\d{{2}}){_SEP_Y}(\d{{1,2}}){_SEP_M}(\d{{1,2}})日?"),
        _ymd,
        True,
    ),
    DatePattern(
        PatternKind.DIGITS_8,
        # Exactly 8 digits - longer runs are barcodes or lot numbers
        re.compile(r"(?<!\d)(\d{4})(\d{2})(\d{2})(?!\d)"),
        _ymd,
        True,
    ),
    DatePattern(
        PatternKind.DIGITS_6,
        re.compile(r"(?<!\d)(\d{2})(\d{2})(\d{2})(?!\d)"),
        _ymd,
        True,
    ),
    DatePattern(
        PatternKind.YEAR_MONTH,
        # Must not be the prefix of a full date, nor a quantity like 45.3g or 35.5以上
        re.compile(rf"(?<![\dR和])(\d{{4}}|\d{{2}}){_SEP_Y}(\d{{1,2}})月?(?![\d./\-月%°gkKmML以未度円])"),
        _ym,
        True,
    ),
    DatePattern(
        PatternKind.ERA,
        re.compile(r"令和(\d{1,2}|元)年(\d{1,2})月(\d{1,2})日?"),
        _era_ymd,
        True,
    ),
    DatePattern(
        PatternKind.ERA,
        re.compile(r"令和(\d{1,2}|元)年(\d{1,2})月(?!\d)"),
        _era_ym,
        True,
    ),
    DatePattern(
        PatternKind.ERA,
        re.compile(rf"R(\d{{1,2}}){_SEP_Y}(\d{{1,2}}){_SEP_M}(\d{{1,2}})日?"),
        _era_ymd,
        True,
    ),
    DatePattern(
        PatternKind.SPACED,
        re.compile(r"(?<!\d)(\d{4}|\d{2})[ \t]+(\d{1,2})[ \t]+(\d{1,2})(?!\d)"),
        _ymd,
        False,
    ),
    DatePattern(
        PatternKind.SPACED,
        re.compile(r"(?<!\d)(\d{4}|\d{2})[ \t]+(\d{1,2})(?![ \t]*\d)"),
        _ym,
        False,
    ),
)


def parse_date_candidates(text: str) -> Iterator[DateCandidate]:
    """
    Yield every date-shaped match in text.

    Candidates come in pattern-table order, then left-to-right within a
    pattern. The same date may be yielded by several patterns. Each call
    re-scans from scratch.

    Args:
        text: Raw OCR text (may be empty)

    Yields:
        DateCandidate for each match
    """
    spaced = normalize_ocr_digits(text)
    compact = compact_text(spaced)

    for pattern in DATE_PATTERNS:
        source = compact if pattern.compact else spaced
        for match in pattern.regex.finditer(source):
            year, month, day = pattern.interpret(match)
            logger.debug(f"Date candidate ({pattern.kind.value}): '{match.group(0)}' -> {year}/{month}/{day}")
            yield DateCandidate(
                year=year,
                month=month,
                day=day,
                kind=pattern.kind,
                matched=match.group(0),
            )


# =============================================================================
# VALIDATION
# =============================================================================

def expand_year(year: int) -> int:
    """Expand a 2-digit year: 0-49 -> 20xx, 50-99 -> 19xx."""
    if year < 100:
        return 2000 + year if year < 50 else 1900 + year
    return year


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in the month, leap years included."""
    return calendar.monthrange(year, month)[1]


def validate_candidate(
    candidate: DateCandidate,
    today: Optional[date] = None,
    past_tolerance_days: int = 1,
) -> Optional[date]:
    """
    Turn a candidate into a calendar date, or None if it is not usable.

    Steps:
    1. Expand 2-digit years
    2. Infer the last day of the month when the day is missing
    3. Reject impossible months/days
    4. Reject dates more than past_tolerance_days before today

    Results are plain dates, so no time-of-day or timezone shift can move
    them across a day boundary when compared with today.
    """
    year = expand_year(candidate.year)
    month = candidate.month

    if not 1 <= month <= 12:
        logger.debug(f"Rejected candidate '{candidate.matched}': month {month} out of range")
        return None

    try:
        last_day = last_day_of_month(year, month)
        day = last_day if candidate.day_inferred else candidate.day
        if not 1 <= day <= last_day:
            logger.debug(f"Rejected candidate '{candidate.matched}': day {day} out of range")
            return None
        value = date(year, month, day)
    except ValueError as e:
        logger.debug(f"Rejected candidate '{candidate.matched}': {e}")
        return None

    if today is None:
        today = date.today()

    if value < today - timedelta(days=past_tolerance_days):
        logger.debug(f"Rejected candidate '{candidate.matched}': {value} is in the past")
        return None

    return value


def first_valid_date(
    candidates: Iterable[DateCandidate],
    today: Optional[date] = None,
    past_tolerance_days: int = 1,
) -> Optional[date]:
    """Return the first candidate that validates, without looking further."""
    if today is None:
        today = date.today()

    for candidate in candidates:
        value = validate_candidate(candidate, today=today, past_tolerance_days=past_tolerance_days)
        if value is not None:
            logger.debug(f"Expiry date found: {value} from '{candidate.matched}' ({candidate.kind.value})")
            return value

    return None


def find_expiry_date(
    text: str,
    today: Optional[date] = None,
    past_tolerance_days: int = 1,
) -> Optional[date]:
    """
    Find the expiry date in raw OCR text.

    Args:
        text: Raw OCR text
        today: Reference date (defaults to the current date)
        past_tolerance_days: Grace window for dates just before today

    Returns:
        The first valid date in pattern priority order, or None
    """
    return first_valid_date(
        parse_date_candidates(text),
        today=today,
        past_tolerance_days=past_tolerance_days,
    )
