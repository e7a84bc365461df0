"""
Core SKU normalization.

Responsibilities:
- clean a single SKU line (trim, uppercase, strip whitespace)
- size extraction ("<width>x<height>")
- color detection against the color table, synonyms as fallback
- synonym substitution into the normalized text
- per-line warnings instead of errors
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, List

from charset_normalizer import from_bytes

from .models import BatchSummary, NormalizationResult
from .rules import (
    COLOR_SEPARATOR,
    DEFAULT_COLOR_TABLE,
    SIZE_SEPARATOR,
    WARN_EMPTY_LINE,
    WARN_MULTIPLE_COLORS,
    WARN_NO_COLOR,
    WARN_NO_SIZE,
    WARN_WHITESPACE_REMOVED,
    ColorTable,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
# Runs after uppercasing, so the separator is always "X".
_SIZE_RE = re.compile(r"([0-9]+(?:\.[0-9]+)?)X([0-9]+(?:\.[0-9]+)?)")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


def _detect_colors(cleaned: str, table: ColorTable) -> List[str]:
    detected = [color for color in table.colors if color in cleaned]
    if detected:
        return detected
    # Synonyms only count when no keyword matched directly.
    return [canonical for synonym, canonical in table.synonyms.items() if synonym in cleaned]


def _substitute_synonyms(cleaned: str, table: ColorTable) -> str:
    # Sequential on purpose: an earlier replacement can create a match for a later one.
    normalized = cleaned
    for synonym, canonical in table.synonyms.items():
        normalized = normalized.replace(synonym, canonical)
    return normalized


def normalize_sku(raw: str, table: ColorTable = DEFAULT_COLOR_TABLE) -> NormalizationResult:
    """
    Normalize a single SKU line.

    Never raises for string input; every irregularity is reported as a warning
    on the result, in detection order.
    """
    warnings: list[str] = []

    cleaned = raw.strip()
    if not cleaned:
        warnings.append(WARN_EMPTY_LINE)

    cleaned = cleaned.upper()

    if _WHITESPACE_RE.search(cleaned):
        warnings.append(WARN_WHITESPACE_REMOVED)
    cleaned = _WHITESPACE_RE.sub("", cleaned)

    size = ""
    match = _SIZE_RE.search(cleaned)
    if match:
        width, height = match.groups()
        size = f"{width}{SIZE_SEPARATOR}{height}"
    else:
        warnings.append(WARN_NO_SIZE)

    colors = _detect_colors(cleaned, table)
    color = ""
    if len(colors) == 1:
        color = colors[0]
    elif len(colors) > 1:
        color = COLOR_SEPARATOR.join(colors)
        warnings.append(WARN_MULTIPLE_COLORS)
    else:
        warnings.append(WARN_NO_COLOR)

    normalized = _substitute_synonyms(cleaned, table)

    return NormalizationResult(
        original=raw,
        normalized=normalized,
        size=size,
        color=color,
        warnings=tuple(warnings),
        status="warn" if warnings else "ok",
    )


def split_lines(text: str) -> List[str]:
    """Split on LF or CRLF, trim each line and drop blank ones."""
    lines = (line.strip() for line in _LINE_SPLIT_RE.split(text or ""))
    return [line for line in lines if line]


def normalize_lines(text: str, table: ColorTable = DEFAULT_COLOR_TABLE) -> List[NormalizationResult]:
    """
    Normalize a multi-line block, one result per non-blank line, order preserved.

    Blank lines are dropped before normalization, so "Empty line." can only
    come from calling normalize_sku directly.
    """
    results = []
    for line in split_lines(text):
        result = normalize_sku(line, table)
        logger.debug("normalized %r -> %r (%s)", line, result.normalized, result.status)
        results.append(result)

    summary = summarize(results)
    logger.info("Normalized %d lines: %d ok, %d warn", summary.lines, summary.ok, summary.warn)
    return results


def summarize(results: Iterable[NormalizationResult]) -> BatchSummary:
    results = list(results)
    tally = Counter(w for r in results for w in r.warnings)
    ok = sum(1 for r in results if r.status == "ok")
    return BatchSummary(
        lines=len(results),
        ok=ok,
        warn=len(results) - ok,
        warnings=dict(tally),
    )


def decode_text(raw: bytes) -> tuple[str, str]:
    """
    Decode an uploaded SKU list to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is stripped.
    - If decode fails, fall back to UTF-8, then to replacement characters.
    Returns (text, encoding_used).
    """
    if not raw:
        return "", "utf-8"

    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used), decode_used
    except (UnicodeDecodeError, LookupError):
        logger.warning("Decoding as %s failed, falling back to utf-8", decode_used)

    try:
        return raw.decode("utf-8-sig"), "utf-8-sig"
    except UnicodeDecodeError:
        # Keep going with replacement characters; each line still gets a result.
        return raw.decode("utf-8", errors="replace"), "utf-8"
