"""
Deterministic normalization rules.

The color table is plain configuration: an ordered keyword list plus an
ordered synonym mapping. It is passed explicitly to the normalizer so tests
(and deployments) can swap it out.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

WARN_EMPTY_LINE = "Empty line."
WARN_WHITESPACE_REMOVED = "Whitespace removed."
WARN_NO_SIZE = "No size detected."
WARN_NO_COLOR = "No color detected."
WARN_MULTIPLE_COLORS = "Multiple colors detected."

COLOR_SEPARATOR = "|"
SIZE_SEPARATOR = "x"

DEFAULT_COLORS = (
    "GUNMETAL",
    "HONEYCOMB",
    "LEMONAPPEAL",
    "MIDNIGHTBLUE",
    "OLIVE",
    "ORCHIDEE",
    "GOLD",
    "SILVER",
    "COPPER",
    "BLACK",
    "WHITE",
)

# Order matters: replacements are applied one after another.
DEFAULT_SYNONYMS = {
    "GUN": "GUNMETAL",
    "GUNM": "GUNMETAL",
    "HONEY": "HONEYCOMB",
    "MIDNIGHT": "MIDNIGHTBLUE",
}


class ColorTableError(ValueError):
    """Raised when a color table file cannot be read or validated."""


def _token(value: str) -> str:
    token = value.strip().upper()
    if not token:
        raise ValueError("color keywords and synonym tokens must be non-empty")
    return token


class ColorTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    colors: Tuple[str, ...] = Field(default=DEFAULT_COLORS)
    # Read-only; insertion order is the substitution order.
    synonyms: Mapping[str, str] = Field(default_factory=lambda: dict(DEFAULT_SYNONYMS), validate_default=True)

    @field_validator("colors")
    @classmethod
    def _uppercase_colors(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(_token(c) for c in v)

    @field_validator("synonyms")
    @classmethod
    def _uppercase_synonyms(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType({_token(k): _token(c) for k, c in v.items()})


DEFAULT_COLOR_TABLE = ColorTable()


def load_color_table(path: str | Path) -> ColorTable:
    """
    Load a color table from a JSON file shaped like
    {"colors": [...], "synonyms": {"TOKEN": "KEYWORD", ...}}.

    Missing keys fall back to the built-in defaults.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ColorTableError(f"cannot read color table {path}: {e}") from e

    if not isinstance(data, dict):
        raise ColorTableError(f"color table {path} must be a JSON object")

    try:
        table = ColorTable(**data)
    except (ValidationError, TypeError) as e:
        raise ColorTableError(f"invalid color table {path}: {e}") from e

    logger.info(
        "Loaded color table from %s (%d colors, %d synonyms)",
        path, len(table.colors), len(table.synonyms),
    )
    return table
