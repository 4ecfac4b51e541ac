"""Bid form workbook import engine."""

from bidform.services.bid_form_parser import get_sheet_names, parse_bid_form
from bidform.services.estimate_mapper import map_to_estimate

__all__ = ["get_sheet_names", "map_to_estimate", "parse_bid_form"]
