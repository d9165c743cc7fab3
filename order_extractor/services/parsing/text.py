"""Regex-driven extraction of order fields from free text.

Used for DOM text and whole-page text, where no structured data is exposed.
Everything here is best effort: a field that cannot be found is None, and
callers decide whether the result is good enough to be an order.
"""
from datetime import date
from typing import Callable

from order_extractor.config import PatternConfig
from order_extractor.core.order import ParsedItem, TextParseResult
from order_extractor.services.parsing.fields import FieldResolver
from order_extractor.services.parsing.sanitizer import ProductNameSanitizer

MIN_ELEMENT_TEXT = 10


class TextPatternParser:
    def __init__(
        self,
        patterns: PatternConfig,
        sanitizer: ProductNameSanitizer,
        max_quantity: int = 100,
        today: Callable[[], date] = date.today,
    ):
        self.patterns = patterns
        self.sanitizer = sanitizer
        self.max_quantity = max_quantity
        self._today = today

    def parse(self, text: str) -> TextParseResult:
        return TextParseResult(
            order_number=self.extract_order_number(text),
            order_date=self.extract_date(text),
            order_total=self.extract_total(text),
            items=self.extract_items(text),
        )

    def extract_order_number(self, text: str) -> str | None:
        match = self.patterns.order_number.search(text or "")
        return match.group(1) if match else None

    def extract_date(self, text: str) -> str | None:
        match = self.patterns.date.search(text or "")
        if not match:
            return None

        found = " ".join(match.group(0).split())
        if not self.patterns.year.search(found):
            found = f"{found}, {self._today().year}"
        return found

    def extract_total(self, text: str) -> float | None:
        """Order total, or None when the text carries no dollar amount at all.

        Labelled totals win. Without a label the largest amount is assumed to
        be the total, which is wrong when one item costs more than the order's
        blended total.
        """
        text = text or ""
        match = self.patterns.order_total.search(text)
        if match:
            return self._price(match.group(1))

        for pattern in self.patterns.total_alternatives:
            match = pattern.search(text)
            if match:
                return self._price(match.group(1))

        prices = self._all_prices(text)
        return max(prices) if prices else None

    def extract_price(self, text: str) -> float:
        """Largest dollar amount in the fragment; line totals beat unit prices."""
        prices = self._all_prices(text or "")
        return max(prices) if prices else 0.0

    def extract_quantity(self, text: str) -> int:
        text = (text or "").strip()
        for pattern in (self.patterns.quantity, self.patterns.quantity_x, self.patterns.quantity_parens):
            match = pattern.search(text)
            if match:
                quantity = int(match.group(1))
                if self.is_plausible_quantity(quantity):
                    return quantity
        return 1

    def is_plausible_quantity(self, quantity: float) -> bool:
        return 0 < quantity < self.max_quantity

    def extract_items(self, text: str) -> list[ParsedItem]:
        items = []
        for line in (l.strip() for l in (text or "").splitlines()):
            if len(line) < 3 or self._is_skipped_line(line):
                continue

            price_match = self.patterns.price.search(line)
            if not price_match:
                continue

            candidate = self.patterns.price.sub("", line, count=1).strip()
            candidate = self.patterns.quantity.sub("", candidate, count=1).strip()
            candidate = self.patterns.quantity_x.sub("", candidate, count=1).strip()

            name = self.sanitizer.sanitize(candidate)
            if len(name) <= 3 or self._is_non_product(name):
                continue

            items.append(ParsedItem(
                name=name,
                price=self._price(price_match.group(1)) or 0.0,
                quantity=self.extract_quantity(line),
            ))
        return items

    def parse_element_text(self, text: str) -> ParsedItem | None:
        """Turn the full text of one item element into an item, if it looks like one."""
        text = " ".join((text or "").split())
        if not text or len(text) < MIN_ELEMENT_TEXT:
            return None
        if self.sanitizer.contains_filter_keyword(text):
            return None

        name = self.sanitizer.sanitize(text)
        if len(name) < 3 or self.patterns.bare_amount.match(name):
            return None

        return ParsedItem(
            name=name,
            price=self.extract_price(text),
            quantity=self.extract_quantity(text),
        )

    def _is_skipped_line(self, line: str) -> bool:
        return any(p.search(line) for p in self.patterns.skip_lines)

    def _is_non_product(self, name: str) -> bool:
        return any(p.search(name) for p in self.patterns.non_product)

    def _all_prices(self, text: str) -> list[float]:
        prices = []
        for match in self.patterns.price.finditer(text):
            price = self._price(match.group(1))
            if price is not None:
                prices.append(price)
        return prices

    @staticmethod
    def _price(raw: str) -> float | None:
        return FieldResolver.parse_number(raw.replace(",", ""))
