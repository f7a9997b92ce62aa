"""
Month abbreviations (SSOT).

Statements are tagged with a Spanish three-letter month abbreviation.
This enum is THE lookup table for their calendar order; nothing else
should compare month strings to sort them.
"""

from enum import Enum


class Month(str, Enum):
    """Calendar month as stored in the month column."""

    ENE = "Ene"
    FEB = "Feb"
    MAR = "Mar"
    ABR = "Abr"
    MAY = "May"
    JUN = "Jun"
    JUL = "Jul"
    AGO = "Ago"
    SEP = "Sep"
    OCT = "Oct"
    NOV = "Nov"
    DIC = "Dic"

    @property
    def ordinal(self) -> int:
        """Calendar position, Ene=1 .. Dic=12."""
        return _ORDINALS[self]

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "Month":
        """Month for a calendar position (1-12)."""
        if not 1 <= ordinal <= 12:
            raise ValueError(f"Month ordinal must be 1-12, got {ordinal}")
        return list(cls)[ordinal - 1]

    @classmethod
    def parse(cls, value: str) -> "Month | None":
        """Look up an abbreviation, ignoring case and surrounding blanks."""
        return _BY_LOWER.get(value.strip().lower())


_ORDINALS: dict[Month, int] = {month: index for index, month in enumerate(Month, start=1)}
_BY_LOWER: dict[str, Month] = {month.value.lower(): month for month in Month}

# Sort position for anything that is not one of the twelve abbreviations
UNKNOWN_MONTH_ORDINAL = 13

# Full Spanish month names, as they appear in statement filenames
FULL_MONTH_NAMES: dict[str, Month] = {
    "ENERO": Month.ENE,
    "FEBRERO": Month.FEB,
    "MARZO": Month.MAR,
    "ABRIL": Month.ABR,
    "MAYO": Month.MAY,
    "JUNIO": Month.JUN,
    "JULIO": Month.JUL,
    "AGOSTO": Month.AGO,
    "SEPTIEMBRE": Month.SEP,
    "OCTUBRE": Month.OCT,
    "NOVIEMBRE": Month.NOV,
    "DICIEMBRE": Month.DIC,
}


def month_ordinal(value: str) -> int:
    """Calendar position of a stored month string.

    Unrecognised strings sort after Dic (UNKNOWN_MONTH_ORDINAL).
    """
    month = _BY_LOWER.get(value.strip().lower()) if value else None
    return month.ordinal if month else UNKNOWN_MONTH_ORDINAL


def month_sort_key(value: str) -> tuple[int, str]:
    """Sort key placing known months in calendar order and the rest last, by text."""
    return (month_ordinal(value), value)
