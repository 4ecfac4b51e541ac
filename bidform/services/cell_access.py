"""
Cell access and numeric coercion for bid form sheets.

Every numeric field the engine extracts goes through to_number(), which
never raises: a malformed or missing cell counts as zero. SheetReader adds
a CellWarning whenever a non-blank cell falls back to zero, so data loss
shows up in the result instead of disappearing into the totals.
"""
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, List, Optional, Union

from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.worksheet.worksheet import Worksheet

from bidform.core.logging import get_logger
from bidform.schemas.workbook import CellWarning

logger = get_logger(__name__)

Column = Union[int, str]

_BOOLEAN_WORDS = {"yes": 1.0, "no": 0.0}


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after trimming."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _coerce(value: Any) -> Optional[float]:
    """Numeric reading of a raw cell value, or None when it has none."""
    if isinstance(value, (bool, int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.lower() in _BOOLEAN_WORDS:
            return _BOOLEAN_WORDS[text.lower()]
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    # NaN/inf would poison every sum they touch
    return number if math.isfinite(number) else None


def to_number(value: Any) -> float:
    """
    Convert a raw cell value to a number, falling back to 0.

    Rules, in order:
    - numbers (and booleans) are returned as floats
    - None and blank strings give 0
    - "yes" / "no" (trimmed, any case) give 1 / 0
    - other strings are parsed as decimals; unparseable text gives 0
    - anything else (dates, times) gives 0
    """
    number = _coerce(value)
    return 0.0 if number is None else number


def is_coercion_fallback(value: Any) -> bool:
    """True when a non-blank value has no numeric reading and to_number() gives 0 for it."""
    return not is_blank(value) and _coerce(value) is None


def cell_text(value: Any) -> Optional[str]:
    """Render a raw cell value as trimmed text, or None when blank."""
    if is_blank(value):
        return None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        # Phase codes and item numbers typed as numbers come back as 1200.0
        return str(int(value))
    return str(value).strip()


class SheetReader:
    """
    Read-only accessor over one worksheet.

    Rows and columns are 1-indexed as shown in Excel (row 1, column "A").
    Out-of-range coordinates and blank cells read as None.
    """

    def __init__(
        self,
        worksheet: Worksheet,
        record_warnings: bool = True,
        max_warnings: int = 200,
    ):
        self.worksheet = worksheet
        self.title = worksheet.title
        self.record_warnings = record_warnings
        self.max_warnings = max_warnings
        self.warnings: List[CellWarning] = []
        self.suppressed_warnings = 0

        # openpyxl recomputes the dimensions on every access
        self._max_row = worksheet.max_row
        self._max_column = worksheet.max_column

    @staticmethod
    def column_index(col: Column) -> int:
        """Column number for a letter ("Z" -> 26) or an already numeric column."""
        if isinstance(col, str):
            return column_index_from_string(col.strip().upper())
        return int(col)

    def value(self, row: int, col: Column) -> Any:
        """Raw value at (row, col), or None."""
        col_idx = self.column_index(col)
        if row < 1 or col_idx < 1 or row > self._max_row or col_idx > self._max_column:
            return None

        value = self.worksheet.cell(row=row, column=col_idx).value
        return None if is_blank(value) else value

    def value_at(self, address: str) -> Any:
        """Raw value at a letter-style address such as "P211"."""
        col_letter, row = coordinate_from_string(address.strip().upper())
        return self.value(row, col_letter)

    def number(self, row: int, col: Column) -> float:
        """Numeric value at (row, col); see to_number()."""
        value = self.value(row, col)
        if is_coercion_fallback(value):
            self._warn(row, self.column_index(col), value)
        return to_number(value)

    def number_at(self, address: str) -> float:
        """Numeric value at a letter-style address."""
        col_letter, row = coordinate_from_string(address.strip().upper())
        return self.number(row, col_letter)

    def optional_number_at(self, address: str) -> Optional[float]:
        """Numeric value at an address, or None when the cell is blank."""
        col_letter, row = coordinate_from_string(address.strip().upper())
        if self.value(row, col_letter) is None:
            return None
        return self.number(row, col_letter)

    def text(self, row: int, col: Column) -> Optional[str]:
        """Trimmed text at (row, col), or None."""
        return cell_text(self.value(row, col))

    def text_at(self, address: str) -> Optional[str]:
        """Trimmed text at a letter-style address, or None."""
        return cell_text(self.value_at(address))

    def _warn(self, row: int, col_idx: int, value: Any) -> None:
        """Record a zero fallback for a non-blank cell."""
        if not self.record_warnings:
            return

        coordinate = f"{get_column_letter(col_idx)}{row}"
        if len(self.warnings) >= self.max_warnings:
            self.suppressed_warnings += 1
            return

        logger.debug(f"Non-numeric value {value!r} in '{self.title}'!{coordinate} counted as 0")
        self.warnings.append(
            CellWarning(
                sheet=self.title,
                cell=coordinate,
                value=value if isinstance(value, (str, int, float)) else str(value),
                message=f"Expected a number, got {value!r}; counted as 0",
            )
        )
