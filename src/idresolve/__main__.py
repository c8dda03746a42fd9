"""Resolve addresses from the command line: ``python -m idresolve 0x... 0x...``."""

from __future__ import annotations

import argparse
import asyncio
import sys

from idresolve.client import IdresolveClient
from idresolve.config import get_settings
from idresolve.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idresolve", description=__doc__)
    parser.add_argument("addresses", nargs="+", help="Addresses to resolve")
    parser.add_argument("--log-level", default=None, help="Override IDRESOLVE_LOG_LEVEL")
    return parser


async def run(addresses: list[str]) -> int:
    async with IdresolveClient(get_settings()) as client:
        results = await client.resolve_many(addresses)

    for address, identity in results.items():
        if identity is None:
            print(f"{address}\t-")
            continue
        notable = " *" if identity.is_notable else ""
        print(f"{address}\t{identity.label}{notable}\t{identity.profile_url or ''}")

    return 0 if any(results.values()) else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)
    return asyncio.run(run(args.addresses))


if __name__ == "__main__":
    sys.exit(main())
