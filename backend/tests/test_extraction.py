"""Tests for label extraction service."""

import dataclasses
import pytest
from datetime import date

from expiry_ocr.services.extraction import (
    ExtractionResult,
    LabelExtractor,
    extract_label,
)


TODAY = date(2025, 9, 1)


@pytest.fixture
def extractor():
    """Create extractor instance."""
    return LabelExtractor(past_tolerance_days=1)


class TestExtractAll:
    """Test combined extraction."""

    def test_name_and_date(self, extractor):
        """Test a typical yogurt label."""
        text = "明治ブルガリアヨーグルト\n賞味期限 2025.9.12\n要冷蔵10℃以下"
        result = extractor.extract(text, today=TODAY)

        assert result.food_name == "ヨーグルト"
        assert result.expiry_date == date(2025, 9, 12)
        assert result.note is None

    def test_date_only(self, extractor):
        """Test a receipt-like text with only a date."""
        result = extractor.extract("賞味期限 令和7年10月5日", today=TODAY)

        assert result.food_name is None
        assert result.expiry_date == date(2025, 10, 5)
        assert result.note is None

    def test_name_without_date_gives_note(self, extractor):
        """Test the note is built when no date was found."""
        text = "ヨーグルト\n株式会社明治\n加糖タイプ\nなめらか"
        result = extractor.extract(text, today=TODAY)

        assert result.food_name == "ヨーグルト"
        assert result.expiry_date is None
        assert result.note == "加糖タイプ / なめらか"

    def test_stale_date_gives_note(self, extractor):
        """Test a rejected manufacturing date leaves room for a note."""
        text = "製造日 2025.8.1\n手作り\n国産"
        result = extractor.extract(text, today=TODAY)

        assert result.expiry_date is None
        assert result.note == "手作り / 国産"

    def test_date_suppresses_note(self, extractor):
        """Test a found date always suppresses the note."""
        text = "2025.9.12\n加糖タイプ\nなめらか"
        result = extractor.extract(text, today=TODAY)

        assert result.expiry_date == date(2025, 9, 12)
        assert result.note is None

    def test_empty_text(self, extractor):
        """Test empty input gives an all-empty result."""
        assert extractor.extract("", today=TODAY) == ExtractionResult()

    def test_misread_digits(self, extractor):
        """Test OCR letter confusions in the date."""
        result = extractor.extract("牛乳\n賞味期限 2O25.lO.O5", today=TODAY)

        assert result.food_name == "牛乳"
        assert result.expiry_date == date(2025, 10, 5)

    def test_full_width_text(self, extractor):
        """Test full-width digits and spaces."""
        result = extractor.extract("賞味期限　２０２５年１０月５日", today=TODAY)
        assert result.expiry_date == date(2025, 10, 5)


class TestExtractionContract:
    """Test result and input contracts."""

    def test_idempotent(self, extractor):
        """Test identical input gives identical output."""
        text = "ヨーグルト\n加糖タイプ\nなめらか\n2025.2"
        first = extractor.extract(text, today=TODAY)
        second = extractor.extract(text, today=TODAY)
        assert first == second

    def test_result_is_immutable(self, extractor):
        """Test results cannot be modified after construction."""
        result = extractor.extract("ヨーグルト", today=TODAY)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.food_name = "牛乳"

    @pytest.mark.parametrize("bad_input", [None, 20250912, b"2025.9.12"])
    def test_non_text_rejected(self, extractor, bad_input):
        """Test non-string input is a caller error."""
        with pytest.raises(TypeError):
            extractor.extract(bad_input)

    def test_tolerance_from_settings(self):
        """Test the default grace window comes from settings."""
        assert LabelExtractor().past_tolerance_days == 1

    def test_standalone_function(self):
        """Test extract_label matches the extractor."""
        result = extract_label("納豆 2025/9/20", today=TODAY)
        assert result == ExtractionResult(food_name="納豆", expiry_date=date(2025, 9, 20))
