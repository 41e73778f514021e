from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

from .client import GoCardlessClient
from .errors import GoCardlessError
from .models import CreatedAtFilter, CurrencyExchangeRateListParams
from .options import with_retries


def _stderr_logger(event: Dict[str, Any]) -> None:
    print(json.dumps(event, ensure_ascii=True), file=sys.stderr)


def build_params(args: argparse.Namespace) -> CurrencyExchangeRateListParams:
    created_at = CreatedAtFilter(gte=args.since, lt=args.until) if (args.since or args.until) else None
    return CurrencyExchangeRateListParams(
        source=args.source,
        target=args.target,
        limit=args.limit,
        created_at=created_at,
    )


def export_rates(client: GoCardlessClient, params: CurrencyExchangeRateListParams, retries: int, out: TextIO) -> int:
    count = 0
    for rate in client.currency_exchange_rates.all(params, options=[with_retries(retries)]).items():
        out.write(json.dumps(rate.model_dump(exclude_none=True), ensure_ascii=True) + "\n")
        count += 1
    return count


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export GoCardless currency exchange rates as JSON lines.")
    parser.add_argument("--source", default=None, help="Source currency, e.g. GBP")
    parser.add_argument("--target", default=None, help="Target currency, e.g. EUR")
    parser.add_argument("--since", default=None, help="Only rates created at or after this timestamp")
    parser.add_argument("--until", default=None, help="Only rates created before this timestamp")
    parser.add_argument("--limit", type=int, default=None, help="Page size")
    parser.add_argument("--retries", type=int, default=3, help="Retries per page request")
    parser.add_argument("--out", default="-", help="Output path, '-' for stdout")
    parser.add_argument("--verbose", action="store_true", help="Log HTTP events to stderr")
    args = parser.parse_args(argv)

    try:
        client = GoCardlessClient.from_env(logger=_stderr_logger if args.verbose else None)
        params = build_params(args)
        if args.out == "-":
            count = export_rates(client, params, args.retries, sys.stdout)
        else:
            with open(args.out, "w", encoding="utf-8") as f:
                count = export_rates(client, params, args.retries, f)
    except GoCardlessError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Exported {count} exchange rates", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
