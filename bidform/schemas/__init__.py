"""Pydantic schemas for parsed workbooks and mapped estimates."""

from bidform.schemas.estimate import (
    AdditionalMarkups,
    EstimateLineItemRecord,
    EstimateRecord,
    EstimateSectionRecord,
    MappedEstimate,
)
from bidform.schemas.workbook import (
    CellWarning,
    LaborLineItem,
    LineItem,
    MarkupPercentages,
    ParsedWorkbook,
    ProjectInfo,
    QuotedItem,
    QuotedItems,
    RateTable,
    RentalLineItem,
    Section,
    SectionKind,
    SectionTotals,
    SubcontractLineItem,
    Summary,
    TotalsRowReading,
    TradeLineItem,
    TradeRates,
)

__all__ = [
    "AdditionalMarkups",
    "CellWarning",
    "EstimateLineItemRecord",
    "EstimateRecord",
    "EstimateSectionRecord",
    "LaborLineItem",
    "LineItem",
    "MappedEstimate",
    "MarkupPercentages",
    "ParsedWorkbook",
    "ProjectInfo",
    "QuotedItem",
    "QuotedItems",
    "RateTable",
    "RentalLineItem",
    "Section",
    "SectionKind",
    "SectionTotals",
    "SubcontractLineItem",
    "Summary",
    "TotalsRowReading",
    "TradeLineItem",
    "TradeRates",
]
