"""Heuristic receipt text parser used when LLM parsing is unavailable."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Optional, Union

from fittracker.models.receipt import (
    DEFAULT_CURRENCY,
    UNKNOWN_MERCHANT,
    ParsedReceipt,
    ReceiptItem,
    ReceiptText,
    clamp_confidence,
)

logger = logging.getLogger(__name__)

HEURISTIC_NOTE = "Tesseract OCR elemzés (fallback)"

KNOWN_MERCHANTS = ("LIDL", "TESCO", "SPAR", "ALDI", "PENNY", "CBA")
TOTAL_KEYWORDS = ("ÖSSZESEN", "TOTAL", "ÖSSZEG", "FIZETENDŐ")
TITLE_KEYWORDS = ("NYUGTA",)

MERCHANT_SCAN_LINES = 5
MIN_ITEM_LINE_LENGTH = 5
MIN_ITEM_NAME_LENGTH = 3
MAX_ITEM_PRICE = 50000

# Space grouped thousands with an optional comma or dot decimal part: "1 234,56", "49.99".
# Ungrouped runs of four or more digits split: "2346" yields "234" and "6".
_AMOUNT = r"\d{1,3}(?:\s?\d{3})*(?:\s?[.,]\d{2})?"
_AMOUNT_RE = re.compile(_AMOUNT)
_ITEM_RE = re.compile(rf"^(.+?)\s+({_AMOUNT})\s*$")
_DATE_RE = re.compile(
    r"\d{4}[.,]\s?\d{1,2}[.,]\s?\d{1,2}|\d{1,2}[.,]\s?\d{1,2}[.,]\s?\d{4}"
)
_DATE_SEPARATORS_RE = re.compile(r"[.,\s]+")


def parse_amount(token: str) -> Optional[float]:
    """Parse a receipt amount such as ``"1 234,56"`` into a float."""

    cleaned = re.sub(r"\s", "", token or "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def normalize_receipt_date(token: str) -> Optional[date]:
    """Interpret ``YYYY.MM.DD`` or ``DD.MM.YYYY`` (dots or commas) as a date."""

    parts = [part for part in _DATE_SEPARATORS_RE.split((token or "").strip()) if part]
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None
    if len(parts[0]) == 4:
        year, month, day = parts
    else:
        day, month, year = parts
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _contains_any(upper_line: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in upper_line for keyword in keywords)


class HeuristicReceiptParser:
    """Line-oriented pattern matcher that turns OCR text into a ParsedReceipt.

    The parser is total: any input, including empty or garbled text, yields a
    result with defaulted fields instead of raising.
    """

    def __init__(self, *, currency: str = DEFAULT_CURRENCY) -> None:
        self._currency = currency

    def parse(
        self,
        receipt: Union[ReceiptText, str, None],
        confidence: float = 0.0,
    ) -> ParsedReceipt:
        if isinstance(receipt, ReceiptText):
            raw_lines = list(receipt.lines)
            confidence = receipt.confidence
        else:
            raw_lines = (receipt or "").splitlines()
        lines = [line.strip() for line in raw_lines]
        lines = [line for line in lines if line]

        merchant, merchant_chain = self._extract_merchant(lines)
        total = self._extract_total(lines)
        purchase_date = self._extract_date(lines) or date.today()
        items = self._extract_items(lines, merchant_chain)

        if total == 0 and items:
            total = round(sum(item.price for item in items), 2)

        score = (confidence or 0.0) / 100
        if total == 0:
            score *= 0.5
        if not items:
            score *= 0.7
        if merchant == UNKNOWN_MERCHANT:
            score *= 0.8

        logger.debug(
            "Heuristic receipt parse merchant=%s total=%s items=%s confidence=%.3f",
            merchant,
            total,
            len(items),
            score,
        )
        return ParsedReceipt(
            total_amount=total,
            merchant=merchant,
            purchase_date=purchase_date,
            items=items,
            currency=self._currency,
            confidence=clamp_confidence(score),
            note=HEURISTIC_NOTE,
        )

    @staticmethod
    def _extract_merchant(lines: List[str]) -> tuple[str, Optional[str]]:
        for line in lines[:MERCHANT_SCAN_LINES]:
            upper = line.upper()
            for chain in KNOWN_MERCHANTS:
                if chain in upper:
                    return line, chain
        return UNKNOWN_MERCHANT, None

    @staticmethod
    def _extract_total(lines: List[str]) -> float:
        # Every keyword line overwrites the previous candidate, so the last one wins.
        total = 0.0
        for line in lines:
            if not _contains_any(line.upper(), TOTAL_KEYWORDS):
                continue
            amounts = [parse_amount(token) for token in _AMOUNT_RE.findall(line)]
            amounts = [amount for amount in amounts if amount is not None]
            if amounts:
                total = max(amounts)
        return total

    @staticmethod
    def _extract_date(lines: List[str]) -> Optional[date]:
        found: Optional[date] = None
        for line in lines:
            match = _DATE_RE.search(line)
            if not match:
                continue
            parsed = normalize_receipt_date(match.group(0))
            if parsed is not None:
                found = parsed
        return found

    @staticmethod
    def _extract_items(lines: List[str], merchant_chain: Optional[str]) -> List[ReceiptItem]:
        skip_keywords = TOTAL_KEYWORDS + TITLE_KEYWORDS
        if merchant_chain:
            skip_keywords += (merchant_chain,)

        items: List[ReceiptItem] = []
        for line in lines:
            if len(line) < MIN_ITEM_LINE_LENGTH or _contains_any(line.upper(), skip_keywords):
                continue
            match = _ITEM_RE.match(line)
            if not match:
                continue
            name = match.group(1).strip()
            price = parse_amount(match.group(2))
            if price is None or not 0 < price < MAX_ITEM_PRICE:
                continue
            if len(name) < MIN_ITEM_NAME_LENGTH:
                continue
            items.append(ReceiptItem(name=name, price=price, quantity=1))
        return items


__all__ = [
    "HEURISTIC_NOTE",
    "HeuristicReceiptParser",
    "normalize_receipt_date",
    "parse_amount",
]
