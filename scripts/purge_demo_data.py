#!/usr/bin/env python
"""Purge demo patients from the configured store (safe by default)."""

import argparse
import asyncio

from ward_handover.cli import purge_demo
from ward_handover.core.config import get_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Purge demo patients safely.")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply deletions (default is dry-run).",
    )
    args = parser.parse_args()

    backend = get_settings().storage.backend
    count = asyncio.run(purge_demo(dry_run=not args.apply))
    if args.apply:
        print(f"Deleted {count} demo patient record(s) from {backend} storage.")
    else:
        print(f"[dry-run] Demo patients matched in {backend} storage: {count}")


if __name__ == "__main__":
    main()
