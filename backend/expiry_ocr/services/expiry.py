"""Expiry status helpers: days remaining and urgency level."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class ExpiryStatus(str, Enum):
    """Urgency of an item by days remaining."""
    FRESH = "fresh"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ExpiryInfo:
    status: ExpiryStatus
    days_remaining: int


def days_until_expiry(expiry_date: date, today: Optional[date] = None) -> int:
    """Whole days from today to expiry_date; negative once expired."""
    if today is None:
        today = date.today()
    return (expiry_date - today).days


def classify_expiry(expiry_date: date, today: Optional[date] = None) -> ExpiryInfo:
    """
    Classify an expiry date.

    expired: already past
    critical: today or tomorrow
    warning: within 3 days
    good: within a week
    fresh: anything later
    """
    days = days_until_expiry(expiry_date, today)

    if days < 0:
        status = ExpiryStatus.EXPIRED
    elif days <= 1:
        status = ExpiryStatus.CRITICAL
    elif days <= 3:
        status = ExpiryStatus.WARNING
    elif days <= 7:
        status = ExpiryStatus.GOOD
    else:
        status = ExpiryStatus.FRESH

    return ExpiryInfo(status=status, days_remaining=days)


def format_date_ja(value: date) -> str:
    """Format as 2025/9/12 (no zero padding)."""
    return f"{value.year}/{value.month}/{value.day}"


def expiry_message(info: ExpiryInfo, expiry_date: date) -> str:
    """Short display label, e.g. '期限: 2025/9/12 (あと3日)'."""
    label = f"期限: {format_date_ja(expiry_date)}"
    days = info.days_remaining

    if info.status == ExpiryStatus.EXPIRED:
        return f"{label} ({abs(days)}日経過)"
    if info.status == ExpiryStatus.CRITICAL:
        if days == 0:
            return f"{label} (今日期限！)"
        return f"{label} (明日期限！)"
    return f"{label} (あと{days}日)"
