"""
Tests for mapping a parsed bid form onto estimate records.
"""
import pytest

from bidform.schemas.estimate import AdditionalMarkups
from bidform.schemas.workbook import (
    LaborLineItem,
    ParsedWorkbook,
    ProjectInfo,
    RentalLineItem,
    SectionKind,
    SubcontractLineItem,
    Summary,
    TradeLineItem,
)
from bidform.services.bid_form_parser import parse_bid_form
from bidform.services.cell_access import SheetReader
from bidform.services.layout import BASE_V1
from bidform.services.line_items import extract_section
from bidform.services.estimate_mapper import (
    apply_additional_markups,
    map_item_type,
    map_line_item,
    map_to_estimate,
)


@pytest.fixture(name="parsed")
def parsed_fixture(bid_form_bytes) -> ParsedWorkbook:
    return parse_bid_form(bid_form_bytes)


class TestAdditionalMarkups:
    """Overhead and profit layered on the bid form price."""

    def test_overhead_then_profit(self):
        summary = Summary(subtotal=1000, total_price=1200, gross_margin_dollars=200)
        outcome = apply_additional_markups(
            summary, AdditionalMarkups(overhead_percentage=10, profit_percentage=5)
        )

        assert outcome.additional_overhead_amount == pytest.approx(100)
        assert outcome.additional_profit_amount == pytest.approx(55)
        assert outcome.gross_margin_dollars == pytest.approx(355)
        assert outcome.total_price == pytest.approx(1355)
        assert outcome.gross_margin_percentage == pytest.approx(26.2, abs=0.01)

    def test_no_markups_leave_margin_untouched(self):
        summary = Summary(
            subtotal=1000, total_price=1200, gross_margin_dollars=200, gross_margin_percentage=16.67
        )
        outcome = apply_additional_markups(summary, AdditionalMarkups())

        assert outcome.additional_overhead_amount == 0
        assert outcome.additional_profit_amount == 0
        assert outcome.total_price == 1200
        assert outcome.gross_margin_percentage == 16.67

    def test_profit_only(self):
        summary = Summary(subtotal=1000, total_price=1000)
        outcome = apply_additional_markups(summary, AdditionalMarkups(profit_percentage=10))

        assert outcome.additional_overhead_amount == 0
        assert outcome.additional_profit_amount == pytest.approx(100)
        assert outcome.gross_margin_percentage == pytest.approx(100 / 1100 * 100)


@pytest.mark.parametrize(
    "kind, expected",
    [
        (SectionKind.LABOR, "labor"),
        (SectionKind.TRADE, "labor"),
        (SectionKind.RENTAL, "rental"),
        (SectionKind.CONDITIONS, "other"),
        (SectionKind.SUBCONTRACT, "subcontractor"),
    ],
)
def test_item_types(kind, expected):
    assert map_item_type(kind) == expected


class TestLineItemRecords:
    """Line items are priced at sell, with components split by kind."""

    def test_trade_item_splits_components(self):
        item = TradeLineItem(
            row_number=72,
            description="Chilled water piping",
            phase_code="23-200",
            field_rate=88.25,
            quantity=120,
            unit="LF",
            hours=20,
            labor_sell=1200,
            material_sell=2400,
            lump_sum=500,
            cost=3500,
            sell=4100,
        )
        record = map_line_item(item, SectionKind.TRADE, 3)

        assert record.item_order == 3
        assert record.item_type == "labor"
        assert record.specification == "23-200"
        assert record.quantity == 120
        assert record.unit == "LF"
        assert record.labor_rate == 88.25
        assert record.labor_cost == 1200
        assert record.material_cost == 2400
        assert record.subcontractor_cost == 500
        assert record.total_cost == 4100

    def test_defaults_for_missing_quantity_and_unit(self):
        item = LaborLineItem(row_number=8, description="PM", rate=95, hours=10, cost=500, sell=600)
        record = map_line_item(item, SectionKind.LABOR, 0)

        assert record.quantity == 1
        assert record.unit == "EA"
        assert record.specification == ""
        assert record.labor_rate == 95
        assert record.labor_cost == 600

    def test_cost_used_when_no_sell(self):
        item = RentalLineItem(row_number=176, description="Lift", quantity=2, cost=800)
        record = map_line_item(item, SectionKind.RENTAL, 0)

        assert record.total_cost == 800
        assert record.rental_cost == 800
        assert record.item_type == "rental"

    def test_conditions_cost_is_labor(self):
        item = RentalLineItem(row_number=188, kind="conditions", description="Permits", cost=400, sell=480)
        record = map_line_item(item, SectionKind.CONDITIONS, 0)

        assert record.item_type == "other"
        assert record.labor_cost == 480
        assert record.rental_cost == 0

    def test_trade_item_without_sell_priced_at_cost(self, make_sheet):
        reader = SheetReader(make_sheet({"B20": "Duct", "P20": 200, "V20": 300}))
        item = extract_section(reader, BASE_V1.sections[1]).line_items[0]

        record = map_line_item(item, SectionKind.TRADE, 0)
        assert record.labor_cost == 200
        assert record.material_cost == 300
        assert record.subcontractor_cost == 0
        assert record.total_cost == 500

    def test_trade_item_mixing_sell_and_cost(self):
        item = TradeLineItem(
            row_number=20,
            description="Duct",
            labor_cost=200,
            labor_sell=240,
            material_cost=300,
            lump_sum=100,
            cost=600,
            sell=340,
        )
        record = map_line_item(item, SectionKind.TRADE, 0)

        assert record.labor_cost == 240
        assert record.material_cost == 300
        assert record.subcontractor_cost == 100
        assert record.total_cost == 640

    def test_subcontract_sell_not_counted_as_labor(self):
        item = SubcontractLineItem(row_number=200, description="Balancing", cost=3000, sell=3000)
        record = map_line_item(item, SectionKind.SUBCONTRACT, 0)

        assert record.subcontractor_cost == 3000
        assert record.labor_cost == 0
        assert record.total_cost == 3000

    def test_components_add_up_to_total(self, parsed):
        mapped = map_to_estimate(parsed)
        for section in mapped.sections:
            for record in section.line_items:
                components = (
                    record.labor_cost
                    + record.material_cost
                    + record.subcontractor_cost
                    + record.rental_cost
                )
                assert components == pytest.approx(record.total_cost)


class TestMapToEstimate:
    """Estimate header and section records from a parsed workbook."""

    def test_header_from_summary(self, parsed):
        estimate = map_to_estimate(parsed).estimate

        assert estimate.project_name == "Riverside Clinic HVAC"
        assert estimate.bid_date.startswith("2026-03-02")
        assert estimate.labor_cost == 1750
        assert estimate.material_cost == 2450
        assert estimate.subcontractor_cost == 9000
        assert estimate.rental_cost == 800
        assert estimate.subtotal == 14000
        assert estimate.total_cost == 14600
        assert estimate.total_price == 15000
        assert estimate.gross_margin_dollars == 4000
        assert estimate.build_method == "excel_import"
        assert "pipefitters" in estimate.rate_inputs.trades

    def test_form_markups_never_persisted(self, parsed):
        estimate = map_to_estimate(parsed).estimate

        assert estimate.overhead_percentage == 0
        assert estimate.profit_percentage == 0
        assert estimate.contingency_percentage == 0
        assert estimate.bond_percentage == 0

    def test_additional_markups_persisted(self, parsed):
        markups = AdditionalMarkups(overhead_percentage=10, profit_percentage=5)
        estimate = map_to_estimate(parsed, markups).estimate

        assert estimate.overhead_percentage == 10
        assert estimate.profit_percentage == 5
        assert estimate.contingency_percentage == 0
        assert estimate.bond_percentage == 0
        assert estimate.additional_overhead_amount == pytest.approx(1400)
        assert estimate.additional_profit_amount == pytest.approx(770)
        assert estimate.total_price == pytest.approx(17170)
        assert estimate.gross_margin_dollars == pytest.approx(6170)

    def test_section_records(self, parsed):
        sections = map_to_estimate(parsed).sections

        assert [s.section_order for s in sections] == list(range(len(parsed.sections)))
        sheet_metal = sections[1]
        assert sheet_metal.section_name == "Sheet Metal"
        assert sheet_metal.description == "Imported from Excel bid form - trade"
        assert sheet_metal.labor_cost == 200
        assert sheet_metal.material_cost == 450
        assert sheet_metal.total_cost == 780
        assert [item.item_order for item in sheet_metal.line_items] == [0, 1]

    def test_empty_workbook(self):
        mapped = map_to_estimate(ParsedWorkbook(project_info=ProjectInfo()))

        assert mapped.estimate.project_name == ""
        assert mapped.estimate.total_price == 0
        assert mapped.sections == []
