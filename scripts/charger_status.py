#!/usr/bin/env python3
"""Print Easee charger information as JSON.

Without ``--charger`` the chargers on the account are listed; with it the
charger's live state, configuration and site are printed.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from easee_ev import (
    EaseeClient,
    EaseeError,
    Forbidden,
    InvalidCredentials,
    RateLimitExceeded,
)
from easee_ev.const import BASE_URL, DEFAULT_API_TIMEOUT

EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_INVALID_CREDENTIALS = 2
EXIT_FORBIDDEN = 3
EXIT_RATE_LIMITED = 4


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--user", default=os.environ.get("EASEE_USER"))
    parser.add_argument("--password", default=os.environ.get("EASEE_PASSWORD"))
    parser.add_argument("--charger", help="Charger id to inspect")
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--timeout", type=int, default=DEFAULT_API_TIMEOUT)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


async def _collect(client: EaseeClient, charger_id: str | None) -> Any:
    if charger_id is None:
        return [
            {
                "id": charger.id,
                "name": charger.name,
                "color": charger.color,
                "product_code": charger.product_code,
            }
            for charger in await client.chargers()
        ]

    state = await client.state(charger_id)
    config = await client.configuration(charger_id)
    site = await client.site(charger_id)
    reading = state.meter_reading
    return {
        "id": charger_id,
        "op_mode": state.op_mode.name.lower(),
        "charging": state.charging,
        "online": state.online,
        "meter_reading": {
            "reading_kwh": reading.reading_kwh,
            "timestamp": reading.timestamp.isoformat(),
        },
        "phase_mode": config.phase_mode,
        "max_charger_current": config.max_charger_current,
        "site": {"name": site.name, "country_id": site.country_id},
    }


async def _run(args: argparse.Namespace) -> int:
    async with EaseeClient(
        args.user,
        args.password,
        base_url=args.base_url,
        timeout=args.timeout,
    ) as client:
        try:
            payload = await _collect(client, args.charger)
        except InvalidCredentials as err:
            print(f"error: {err}", file=sys.stderr)
            return EXIT_INVALID_CREDENTIALS
        except Forbidden as err:
            print(f"error: {err}", file=sys.stderr)
            return EXIT_FORBIDDEN
        except RateLimitExceeded as err:
            print(f"error: {err}; try again later", file=sys.stderr)
            return EXIT_RATE_LIMITED
        except EaseeError as err:
            print(f"error: {err}", file=sys.stderr)
            return EXIT_REQUEST_FAILED
    print(json.dumps(payload, indent=2))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.user or not args.password:
        parser.error("--user and --password (or EASEE_USER/EASEE_PASSWORD) are required")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
