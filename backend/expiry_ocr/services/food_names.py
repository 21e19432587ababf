"""Food name detection by fixed vocabulary lookup."""

import logging
import re
from typing import Dict, Optional, Tuple

from .dates import normalize_text

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


# Common perishable foods, grouped by category.
# Order is significant: the first entry found in the text wins, so a
# generic term listed before a longer synonym (ヨーグルト before
# プレーンヨーグルト, パン before 食パン) shadows it.
FOOD_VOCABULARY: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("dairy", (
        "ヨーグルト", "ヨーグル", "プレーンヨーグルト",
        "牛乳", "ミルク", "乳飲料",
        "チーズ", "バター", "マーガリン",
    )),
    ("bakery", ("パン", "食パン", "ロールパン")),
    ("egg", ("卵", "たまご", "玉子")),
    ("produce", (
        "サラダ", "レタス", "キャベツ",
        "トマト", "きゅうり", "にんじん",
    )),
    ("meat", ("肉", "牛肉", "豚肉", "鶏肉")),
    ("fish", ("魚", "さかな", "サーモン")),
    ("soy", ("豆腐", "とうふ", "納豆")),
    ("prepared", ("おにぎり", "お弁当", "弁当")),
)

FOOD_NAMES: Tuple[str, ...] = tuple(
    name for _, names in FOOD_VOCABULARY for name in names
)

_CATEGORY_BY_NAME: Dict[str, str] = {
    name: category for category, names in FOOD_VOCABULARY for name in names
}


def match_food_name(text: str) -> Optional[str]:
    """
    Find the first vocabulary entry contained in text.

    Matching is exact substring search on the NFKC-normalized text with
    whitespace and line breaks removed, so "ヨーグ ルト" and half-width "ﾖｰｸﾞﾙﾄ" both match.

    Returns:
        The vocabulary entry, or None
    """
    haystack = _WHITESPACE.sub("", normalize_text(text))
    if not haystack:
        return None

    for name in FOOD_NAMES:
        if name in haystack:
            logger.debug(f"Food name found: {name}")
            return name

    return None


def food_category(name: Optional[str]) -> Optional[str]:
    """Category of a vocabulary entry (dairy, bakery, ...), None otherwise."""
    if not name:
        return None
    return _CATEGORY_BY_NAME.get(name)
