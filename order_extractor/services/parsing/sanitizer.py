import re
from collections.abc import Iterable

from order_extractor.config import PatternConfig

_WHITESPACE = re.compile(r"\s+")
_ZERO_WIDTH = "\u200b"


class ProductNameSanitizer:
    """Strips price, quantity and promotional noise from a candidate item name.

    Rules run in a fixed order. The "Was $X" anchor must be removed before the
    generic trailing-price rule, otherwise the literal "Was" survives in the
    name. Returns "" when the cleaned text contains a filter keyword.
    """

    def __init__(self, patterns: PatternConfig, filter_keywords: Iterable[str]):
        self.rules: list[re.Pattern] = [
            patterns.cleanup_quantity,
            patterns.cleanup_multipack,
            patterns.cleanup_was_price,
            patterns.cleanup_price,
            patterns.cleanup_unit_price,
            patterns.cleanup_weight_adjusted,
            patterns.cleanup_count,
        ]
        self.filter_keywords = list(filter_keywords)
        self._bare_amount = patterns.bare_amount

    def sanitize(self, text: str) -> str:
        if not text:
            return ""

        cleaned = text.strip()
        for rule in self.rules:
            cleaned = rule.sub("", cleaned).strip()

        cleaned = _WHITESPACE.sub(" ", cleaned.replace(_ZERO_WIDTH, "")).strip()

        if self.contains_filter_keyword(cleaned):
            return ""
        return cleaned

    def contains_filter_keyword(self, text: str) -> bool:
        return any(keyword in text for keyword in self.filter_keywords)

    def extract_name_from_text(self, text: str) -> str:
        """Pick the most name-like line of a multi-line element text."""
        if not text:
            return ""

        for line in (l.strip() for l in text.splitlines()):
            if len(line) < 3 or self._bare_amount.match(line):
                continue
            if any(k.lower() in line.lower() for k in self.filter_keywords):
                continue
            cleaned = self.sanitize(line)
            if len(cleaned) > 3:
                return cleaned

        return self.sanitize(text)
