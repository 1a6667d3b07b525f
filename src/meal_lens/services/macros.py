"""Extraction of macro values from free-text analysis answers."""

import re
from dataclasses import dataclass, field
from typing import Protocol

from meal_lens.domain.meals import Macros

_CALORIES_PATTERN = re.compile(r"# ⚡ (\d+) Calories", re.ASCII)
_PROTEIN_PATTERN = re.compile(r"\*\*Protein:\*\* (\d+)g", re.ASCII)
_CARBS_PATTERN = re.compile(r"\*\*Carbs:\*\* (\d+)g", re.ASCII)
_FAT_PATTERN = re.compile(r"\*\*Fat:\*\* (\d+)g", re.ASCII)

_MACRO_LINE_PATTERN = re.compile(
    r"# ⚡.*|\*\*Protein:\*\*.*|\*\*Carbs:\*\*.*|\*\*Fat:\*\*.*"
)


class MacroExtractor(Protocol):
    """Interface for turning an analysis answer into macro values."""

    def extract(self, text: str) -> Macros:
        """Return macros found in the text, zero for anything missing."""


@dataclass
class RegexMacroExtractor(MacroExtractor):
    """Extractor matching the fixed answer template field by field.

    Each field is searched independently and the earliest match wins. A
    field that does not appear is reported as 0; malformed text never
    raises. Calories are not reconciled against the other fields.
    """

    calories_pattern: re.Pattern[str] = field(default=_CALORIES_PATTERN)
    protein_pattern: re.Pattern[str] = field(default=_PROTEIN_PATTERN)
    carbs_pattern: re.Pattern[str] = field(default=_CARBS_PATTERN)
    fat_pattern: re.Pattern[str] = field(default=_FAT_PATTERN)

    def extract(self, text: str) -> Macros:
        """Extract calories, protein, carbs and fat from the text."""
        return Macros(
            calories=_first_int(self.calories_pattern, text),
            protein=_first_int(self.protein_pattern, text),
            carbs=_first_int(self.carbs_pattern, text),
            fat=_first_int(self.fat_pattern, text),
        )


def strip_macro_lines(text: str) -> str:
    """Remove the heading and macro label lines, leaving any commentary."""
    return _MACRO_LINE_PATTERN.sub("", text).strip()


def _first_int(pattern: re.Pattern[str], text: str) -> int:
    match = pattern.search(text)
    if match is None:
        return 0
    return int(match.group(1))
