from __future__ import annotations

import argparse
import json
from pathlib import Path

from brickdesk.api.schemas import DraftInput
from brickdesk.clients.catalog import StaticCatalogSource, build_catalog_source
from brickdesk.core.config import get_settings
from brickdesk.core.logging import configure_logging
from brickdesk.domain.catalog import Catalog
from brickdesk.workflow import validation_reasons


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Brickdesk order engine CLI")
    top = parser.add_subparsers(dest="command", required=True)

    quote = top.add_parser("quote", help="Resolve a draft order and print its totals")
    quote.add_argument("draft", help="Path to a draft JSON file")
    quote.add_argument("--catalog", default=None, help="Catalog JSON file (default: remote API)")
    quote.add_argument("--kind", choices=["order", "place_order"], default="place_order")

    return parser


def _load_catalog(path: str | None) -> Catalog:
    if path:
        return StaticCatalogSource(Catalog.model_validate_json(Path(path).read_text(encoding="utf-8"))).load()
    return build_catalog_source(get_settings()).load()


def _quote(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args.catalog)
    draft_input = DraftInput.model_validate_json(Path(args.draft).read_text(encoding="utf-8"))
    draft = draft_input.to_draft(catalog, get_settings().unit_price_places)
    totals = draft.totals
    reasons = validation_reasons(
        draft,
        args.kind,
        allow_negative_totals=get_settings().allow_negative_totals,
        catalog=catalog,
    )
    print(
        json.dumps(
            {
                "grand_total": str(totals.grand_total),
                "order_total": str(totals.order_total),
                "remaining_amount": str(totals.remaining_amount),
                "complete_lines": totals.complete_lines,
                "ready": not reasons,
                "problems": reasons,
            },
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0 if not reasons else 1


def main() -> int:
    configure_logging()
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "quote":
        return _quote(args)

    parser.error("unsupported command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
