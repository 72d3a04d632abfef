"""
Price a stored quote from JSON exports
======================================

Reads a quote (or order) document, its portal and modifier set from JSON
files, runs the pricing engine, and prints the pricing fields that would be
written back to the quote.

Usage:
    python scripts/price_quote.py quote.json --modifier-set ms.json --portal portal.json
    python scripts/price_quote.py quote.json -m ms.json -p portal.json --keep-commission

``--keep-commission`` treats the input quote as previously priced and
carries its commission over, as a recalculation does.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from shipquote.core.config import settings
from shipquote.core.exceptions import PricingError
from shipquote.services.quotePricingService import QuotePricingRequest, price_quote

logger = logging.getLogger("price_quote")


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Price a quote document.")
    parser.add_argument("quote", type=Path, help="Quote or order document (JSON)")
    parser.add_argument("-m", "--modifier-set", type=Path, required=True)
    parser.add_argument("-p", "--portal", type=Path, required=True)
    parser.add_argument("--keep-commission", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())

    quote = _load_json(args.quote)
    try:
        pricing = price_quote(
            QuotePricingRequest.from_document(quote),
            _load_json(args.modifier_set),
            _load_json(args.portal),
            previous=quote if args.keep_commission else None,
        )
    except PricingError:
        logger.exception("Could not price %s", args.quote)
        return 1

    json.dump(pricing.to_document(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
