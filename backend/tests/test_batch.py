"""Tests for batch processing service."""

import pytest
from datetime import date

from expiry_ocr.services.batch import CSVParser, CSVRow, SequentialBatchProcessor
from expiry_ocr.services.extraction import LabelExtractor


TODAY = date(2025, 9, 1)


@pytest.fixture
def parser():
    """Create CSV parser instance."""
    return CSVParser()


@pytest.fixture
def processor():
    """Create batch processor instance."""
    return SequentialBatchProcessor()


class TestCSVParserBasic:
    """Test basic CSV parsing."""

    def test_valid_csv(self, parser):
        """Test parsing CSV with the required columns."""
        csv_content = """item_id,ocr_text
a1,ヨーグルト 2025.9.12
a2,牛乳"""

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 2
        assert len(errors) == 0
        assert rows[0].item_id == "a1"
        assert rows[0].ocr_text == "ヨーグルト 2025.9.12"
        assert rows[0].row_number == 2
        assert rows[1].item_id == "a2"

    def test_multiline_text(self, parser):
        """Test quoted OCR text keeps its line breaks."""
        csv_content = 'item_id,ocr_text\na1,"ヨーグルト\n賞味期限 2025.9.12"\n'

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 1
        assert rows[0].ocr_text == "ヨーグルト\n賞味期限 2025.9.12"

    def test_case_insensitive_columns(self, parser):
        """Test that column names are case-insensitive."""
        csv_content = """ITEM_ID,OCR_Text
a1,牛乳"""

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 1
        assert rows[0].item_id == "a1"

    def test_unknown_columns_ignored(self, parser):
        """Test extra columns do not fail parsing."""
        csv_content = """item_id,ocr_text,source
a1,牛乳,camera"""

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 1
        assert len(errors) == 0


class TestCSVParserValidation:
    """Test CSV validation."""

    def test_missing_required_column(self, parser):
        """Test error when required column is missing."""
        csv_content = """item_id,text
a1,牛乳"""

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 0
        assert len(errors) == 1
        assert "ocr_text" in errors[0].message

    def test_empty_file(self, parser):
        """Test error for empty content."""
        rows, errors = parser.parse("")

        assert len(rows) == 0
        assert errors[0].field == "header"

    def test_empty_item_id(self, parser):
        """Test error for empty item ID."""
        csv_content = """item_id,ocr_text
,牛乳
a2,卵"""

        rows, errors = parser.parse(csv_content)

        assert [r.item_id for r in rows] == ["a2"]
        assert errors[0].row_number == 2
        assert errors[0].field == "item_id"

    def test_empty_text(self, parser):
        """Test error for blank OCR text."""
        csv_content = """item_id,ocr_text
a1,   """

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 0
        assert errors[0].field == "ocr_text"

    def test_duplicate_item_id(self, parser):
        """Test later duplicates are rejected."""
        csv_content = """item_id,ocr_text
a1,牛乳
a1,卵"""

        rows, errors = parser.parse(csv_content)

        assert len(rows) == 1
        assert rows[0].ocr_text == "牛乳"
        assert "Duplicate" in errors[0].message


class _FailingExtractor:
    def extract(self, text, today=None):
        raise RuntimeError("boom")


class TestSequentialBatchProcessor:
    """Test batch extraction."""

    def test_results_in_order(self, processor):
        """Test each row is extracted in CSV order."""
        rows = [
            CSVRow(item_id="a1", ocr_text="ヨーグルト\n賞味期限 2025.9.12", row_number=2),
            CSVRow(item_id="a2", ocr_text="北海道産\n手作り", row_number=3),
        ]

        results = processor.process_batch(rows, LabelExtractor(), today=TODAY)

        assert [r["item_id"] for r in results] == ["a1", "a2"]
        assert all(r["success"] for r in results)
        assert results[0]["result"].expiry_date == date(2025, 9, 12)
        assert results[0]["result"].food_name == "ヨーグルト"
        assert results[1]["result"].expiry_date is None
        assert results[1]["result"].note == "北海道産 / 手作り"

    def test_failure_is_reported_per_row(self, processor):
        """Test an extractor error fails only that row."""
        rows = [CSVRow(item_id="a1", ocr_text="牛乳", row_number=2)]

        results = processor.process_batch(rows, _FailingExtractor(), today=TODAY)

        assert results[0]["success"] is False
        assert "boom" in results[0]["error"]
        assert results[0]["result"] is None

    def test_empty_batch(self, processor):
        """Test no rows gives no results."""
        assert processor.process_batch([], LabelExtractor(), today=TODAY) == []

    def test_processor_does_not_cap_rows(self, processor):
        """Test the row limit is left to the caller, every row is processed."""
        rows = [
            CSVRow(item_id=f"a{i}", ocr_text="牛乳", row_number=i + 2)
            for i in range(120)
        ]

        results = processor.process_batch(rows, LabelExtractor(), today=TODAY)

        assert len(results) == 120
        assert all(r["result"].food_name == "牛乳" for r in results)
