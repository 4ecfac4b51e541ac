"""
Bid Form Import Engine - CLI Entry Point

Usage:
    python -m bidform BID_FORM.xlsm             Print the parsed workbook as JSON
    python -m bidform BID_FORM.xlsm --map       Print the mapped estimate
    python -m bidform BID_FORM.xlsm --sheets    List the workbook's sheets
"""

import argparse
import json
import sys
from pathlib import Path

from bidform.core.logging import get_logger, setup_logging
from bidform.schemas.estimate import AdditionalMarkups
from bidform.services.bid_form_parser import get_sheet_names, parse_bid_form
from bidform.services.estimate_mapper import map_to_estimate
from bidform.services.layout import LAYOUTS, get_layout

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bidform",
        description="Extract a cost estimate from a bid form workbook",
    )
    parser.add_argument("workbook", help="Path to the .xlsx/.xlsm bid form")
    parser.add_argument("--sheets", action="store_true", help="List sheet names and exit")
    parser.add_argument("--map", action="store_true", help="Print the mapped estimate instead of the parse")
    parser.add_argument("--overhead", type=float, default=0.0, help="Additional overhead percentage")
    parser.add_argument("--profit", type=float, default=0.0, help="Additional profit percentage")
    parser.add_argument("--layout", choices=sorted(LAYOUTS), help="Bid form layout version")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.verbose or None)

    path = Path(args.workbook)
    try:
        content = path.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return 1

    if args.sheets:
        try:
            print(json.dumps(get_sheet_names(content), indent=args.indent))
        except Exception as e:
            logger.error(f"Not a readable workbook: {e}")
            return 1
        return 0

    parsed = parse_bid_form(content, layout=get_layout(args.layout))

    if args.map:
        markups = AdditionalMarkups(
            overhead_percentage=args.overhead,
            profit_percentage=args.profit,
        )
        print(map_to_estimate(parsed, markups).model_dump_json(indent=args.indent))
    else:
        print(parsed.model_dump_json(indent=args.indent))

    return 1 if parsed.errors else 0


if __name__ == "__main__":
    sys.exit(main())
