"""
Row decision tracking for section extraction.
Every walked row is counted exactly once, as kept or dropped.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Set

KEPT = "KEPT"
DROPPED = "DROPPED"

# Drop reasons
BLANK_TEMPLATE_ROW = "blank_template_row"  # No description, no cost, no lump sum
NO_FINANCIAL_VALUES = "no_financial_values"  # Built, but cost, hours and sell are all zero


@dataclass
class RowDecision:
    """
    What happened to one worksheet row.

    Attributes:
        row: Worksheet row number
        status: KEPT or DROPPED
        reasons: Reason codes for a drop
    """
    row: int
    status: str
    reasons: Set[str] = field(default_factory=set)

    @classmethod
    def kept(cls, row: int) -> "RowDecision":
        return cls(row=row, status=KEPT)

    @classmethod
    def dropped(cls, row: int, reason: str) -> "RowDecision":
        return cls(row=row, status=DROPPED, reasons={reason})

    def is_kept(self) -> bool:
        return self.status == KEPT


class ExtractionStats:
    """Per-section row counts with a breakdown of drop reasons."""

    def __init__(self, section_name: str):
        self.section_name = section_name
        self.rows_total = 0
        self.rows_kept = 0
        self.rows_dropped = 0
        self.dropped_reason_counts: Counter = Counter()

    def commit_row(self, decision: RowDecision) -> None:
        """Record the decision for one row."""
        self.rows_total += 1

        if decision.is_kept():
            self.rows_kept += 1
            return

        self.rows_dropped += 1
        for reason in decision.reasons:
            self.dropped_reason_counts[reason] += 1

    def to_dict(self) -> Dict[str, int]:
        """Flat counts, with one 'dropped_<reason>' key per reason seen."""
        result = {
            "rows_total": self.rows_total,
            "rows_kept": self.rows_kept,
            "rows_dropped": self.rows_dropped,
        }
        for reason, count in sorted(self.dropped_reason_counts.items()):
            result[f"dropped_{reason}"] = count
        return result

    def __repr__(self):
        return (
            f"ExtractionStats(section={self.section_name!r}, "
            f"total={self.rows_total}, "
            f"kept={self.rows_kept}, "
            f"dropped={self.rows_dropped}, "
            f"reasons={dict(self.dropped_reason_counts)})"
        )
