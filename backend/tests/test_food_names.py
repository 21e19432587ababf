"""Tests for food name matching."""

import pytest
from expiry_ocr.services.food_names import (
    FOOD_NAMES,
    food_category,
    match_food_name,
)


class TestFoodNameMatching:
    """Test vocabulary lookup."""

    def test_exact_vocabulary_term(self):
        """Test a single vocabulary term is returned as-is."""
        assert match_food_name("明治ブルガリアヨーグルト 400g") == "ヨーグルト"

    def test_no_vocabulary_term(self):
        """Test text without any vocabulary term."""
        assert match_food_name("Fresh apples from Aomori") is None

    def test_empty_text(self):
        """Test empty and whitespace-only text."""
        assert match_food_name("") is None
        assert match_food_name("  \n ") is None

    def test_whitespace_ignored(self):
        """Test OCR-split words still match."""
        assert match_food_name("ヨーグ ルト") == "ヨーグルト"

    def test_line_break_ignored(self):
        """Test a word split across OCR lines still matches."""
        assert match_food_name("ヨーグ\nルト") == "ヨーグルト"

    def test_half_width_katakana(self):
        """Test half-width katakana is normalized."""
        assert match_food_name("ﾖｰｸﾞﾙﾄ") == "ヨーグルト"

    @pytest.mark.parametrize("text,expected", [
        # Generic terms listed first shadow their longer synonyms
        ("プレーンヨーグルト", "ヨーグルト"),
        ("超熟 食パン 6枚切", "パン"),
        ("国産 鶏肉 もも", "肉"),
        # Earlier categories win
        ("ミルクパン", "ミルク"),
        ("お弁当", "お弁当"),
        ("絹ごし豆腐", "豆腐"),
    ])
    def test_vocabulary_order(self, text, expected):
        """Test the first vocabulary entry in list order wins."""
        assert match_food_name(text) == expected

    def test_vocabulary_order_is_stable(self):
        """Test the vocabulary keeps its leading order."""
        assert FOOD_NAMES[:3] == ("ヨーグルト", "ヨーグル", "プレーンヨーグルト")
        assert FOOD_NAMES[-1] == "弁当"
        assert len(FOOD_NAMES) == len(set(FOOD_NAMES))


class TestFoodCategory:
    """Test category lookup."""

    def test_known_names(self):
        """Test categories of vocabulary entries."""
        assert food_category("ヨーグルト") == "dairy"
        assert food_category("食パン") == "bakery"
        assert food_category("たまご") == "egg"
        assert food_category("トマト") == "produce"
        assert food_category("豚肉") == "meat"
        assert food_category("サーモン") == "fish"
        assert food_category("納豆") == "soy"
        assert food_category("おにぎり") == "prepared"

    def test_unknown_names(self):
        """Test non-vocabulary input."""
        assert food_category("apple") is None
        assert food_category(None) is None
