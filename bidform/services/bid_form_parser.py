"""
Parser for the estimating bid form workbook (.xlsx / .xlsm).

Extracts the rate table from the rates sheet, project info, markups,
sections and the reconciled summary from the base bid sheet, and vendor
quotes from the optional quoted items sheet.

A missing sheet or a corrupt file never raises: the problem is recorded
in ParsedWorkbook.errors and whatever could be read is returned.
"""
from io import BytesIO
from typing import Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook

from bidform.core.config import settings
from bidform.core.logging import get_logger
from bidform.schemas.workbook import MarkupPercentages, ParsedWorkbook, ProjectInfo, Section
from bidform.services.cell_access import SheetReader
from bidform.services.extraction_stats import ExtractionStats
from bidform.services.layout import BidFormLayout, get_layout
from bidform.services.line_items import extract_section
from bidform.services.quoted_items import extract_quoted_items
from bidform.services.rate_table import extract_rate_table
from bidform.services.summary import build_summary

logger = get_logger(__name__)


def get_sheet_names(file_buffer: bytes) -> List[str]:
    """
    List the sheet names of a workbook.

    Raises:
        Whatever openpyxl raises for a buffer that is not a workbook
    """
    workbook = load_workbook(BytesIO(file_buffer), read_only=True)
    try:
        return list(workbook.sheetnames)
    finally:
        workbook.close()


def read_project_info(reader: SheetReader, layout: BidFormLayout) -> ProjectInfo:
    """Project header cells of the base bid sheet."""
    return ProjectInfo(
        **{field: reader.text_at(address) for field, address in layout.project_info_cells}
    )


def read_markup_percentages(reader: SheetReader, layout: BidFormLayout) -> MarkupPercentages:
    """Markup cells of the base bid sheet; a zero or blank cell takes the layout default."""
    return MarkupPercentages(
        **{cell.field: reader.number_at(cell.address) or cell.default for cell in layout.markup_cells}
    )


def extract_sections(
    reader: SheetReader,
    layout: BidFormLayout,
) -> tuple[List[Section], Dict[str, Dict[str, int]]]:
    """
    Extract every configured section in layout order.

    Returns:
        Tuple of (sections that have line items, row stats by section name)
    """
    sections = []
    stats = {}
    for definition in layout.sections:
        section_stats = ExtractionStats(definition.name)
        section = extract_section(reader, definition, section_stats)
        stats[definition.name] = section_stats.to_dict()
        if section.line_items:
            sections.append(section)
    return sections, stats


def _open_sheet(workbook: Workbook, sheet_name: str) -> SheetReader:
    return SheetReader(
        workbook[sheet_name],
        record_warnings=settings.RECORD_CELL_WARNINGS,
        max_warnings=settings.MAX_CELL_WARNINGS,
    )


def parse_bid_form(
    file_buffer: bytes,
    layout: Optional[BidFormLayout] = None,
) -> ParsedWorkbook:
    """
    Parse a bid form workbook buffer.

    Args:
        file_buffer: The workbook file contents
        layout: Template layout; defaults to the configured layout

    Returns:
        ParsedWorkbook, with errors listing anything that could not be read
    """
    layout = layout or get_layout()
    result = ParsedWorkbook()
    readers: List[SheetReader] = []
    workbook = None

    try:
        # Computed values, not formulas
        workbook = load_workbook(BytesIO(file_buffer), data_only=True)
        logger.info(f"Parsing bid form ({layout.name}), sheets: {workbook.sheetnames}")

        if layout.rates_sheet in workbook.sheetnames:
            reader = _open_sheet(workbook, layout.rates_sheet)
            readers.append(reader)
            result.rate_table = extract_rate_table(reader, layout.rate_table)
        else:
            logger.warning(f"Sheet '{layout.rates_sheet}' not found")
            result.errors.append(f"{layout.rates_sheet} sheet not found")

        if layout.base_bid_sheet in workbook.sheetnames:
            reader = _open_sheet(workbook, layout.base_bid_sheet)
            readers.append(reader)
            result.project_info = read_project_info(reader, layout)
            result.markup_percentages = read_markup_percentages(reader, layout)
            result.sections, result.extraction_stats = extract_sections(reader, layout)
            result.summary = build_summary(result.sections, reader, layout.totals_row)
        else:
            logger.warning(f"Sheet '{layout.base_bid_sheet}' not found")
            result.errors.append(f"{layout.base_bid_sheet} sheet not found")

        # Optional sheet: absence is not an error
        if layout.quoted_items_sheet in workbook.sheetnames:
            reader = _open_sheet(workbook, layout.quoted_items_sheet)
            readers.append(reader)
            result.quoted_items = extract_quoted_items(reader, layout.quoted_items)

    except Exception as e:
        # Single boundary: a workbook that cannot be read still yields a result
        logger.error(f"Bid form parse failed: {e}")
        result.errors.append(f"Parse error: {e}")
    finally:
        if workbook is not None:
            workbook.close()

    warnings = [warning for reader in readers for warning in reader.warnings]
    suppressed = sum(reader.suppressed_warnings for reader in readers)
    suppressed += max(0, len(warnings) - settings.MAX_CELL_WARNINGS)
    result.warnings = warnings[: settings.MAX_CELL_WARNINGS]
    if suppressed:
        logger.warning(f"{suppressed} further cell warnings suppressed")

    logger.info(
        f"Parsed bid form: {len(result.sections)} sections, "
        f"{sum(len(s.line_items) for s in result.sections)} line items, "
        f"{len(result.errors)} errors, {len(result.warnings)} cell warnings"
    )
    return result
