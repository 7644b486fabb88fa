"""Barcode matching for hardware lookups.

A scanned barcode and the one stored on a hardware record rarely agree
byte-for-byte: scanners drop the leading zero of an EAN-13, people type
dashes and spaces, and letters come back in whatever case the label used.
``barcodes_match`` compares two values through their alias sets so a
physical scan finds the record the inventory was created with.
"""

from __future__ import annotations

import re

__all__ = ["barcode_aliases", "barcodes_match", "normalize_barcode"]


_ALPHA_RE = re.compile(r"[A-Za-z]")
_NON_DIGIT_RE = re.compile(r"\D")
_WHITESPACE_RE = re.compile(r"\s+")


def _clean(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value.strip())


def normalize_barcode(raw: str | None) -> str | None:
    """Canonical form: digits only for numeric codes (12 digits padded to
    13), upper case otherwise. Blank input gives None."""

    if raw is None:
        return None
    cleaned = _clean(raw)
    if not cleaned:
        return None
    if not _ALPHA_RE.search(cleaned):
        digits = _NON_DIGIT_RE.sub("", cleaned)
        if digits:
            return "0" + digits if len(digits) == 12 else digits
    return cleaned.upper()


def barcode_aliases(raw: str | None) -> set[str]:
    """Every spelling of ``raw`` that should be treated as the same code."""

    if raw is None:
        return set()
    cleaned = _clean(raw)
    if not cleaned:
        return set()

    aliases = {cleaned.upper()}
    canonical = normalize_barcode(cleaned)
    if canonical:
        aliases.add(canonical)
    if not _ALPHA_RE.search(cleaned):
        digits = _NON_DIGIT_RE.sub("", cleaned)
        if digits:
            aliases.add(digits)
            if len(digits) == 12:
                aliases.add("0" + digits)
            elif len(digits) == 13 and digits.startswith("0"):
                aliases.add(digits[1:])
    return aliases


def barcodes_match(left: str | None, right: str | None) -> bool:
    return bool(barcode_aliases(left) & barcode_aliases(right))
