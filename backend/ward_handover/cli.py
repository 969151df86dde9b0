"""Ward Handover CLI - Command Line Interface for administrative tasks.

Usage:
    python -m ward_handover.cli <command> [options]

Commands:
    init-db         Create storage (tables or key-value file)
    check-db        Check storage connectivity
    seed-demo       Seed demo data into an empty store
    reset-demo      Wipe every record and reseed demo data
    purge-demo      Delete demo patients and their records (dry run unless --apply)
    version         Show version information

Examples:
    python -m ward_handover.cli init-db
    python -m ward_handover.cli seed-demo
    python -m ward_handover.cli purge-demo --apply

"""

import argparse
import asyncio
import sys
from typing import NoReturn

from ward_handover.core.config import settings


def print_banner() -> None:
    """Print Ward Handover CLI banner."""
    print("\n" + "=" * 50)
    print(" Ward Handover CLI")
    print(" SBAR Handover & Hospital at Night Records")
    print("=" * 50 + "\n")


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"SUCCESS: {message}")


def print_info(message: str) -> None:
    """Print info message."""
    print(f"INFO: {message}")


async def check_database() -> bool:
    """Check the configured backend can be read."""
    from ward_handover.api.v1.deps import get_kv_store
    from ward_handover.services.storage import StorageError

    print_info(f"Checking {settings.storage.backend} storage...")

    if settings.storage.backend == "local":
        kv_store = get_kv_store()
        try:
            await kv_store.get("handover_initialized")
        except StorageError as e:
            print_error(f"Local storage unreadable: {e}")
            return False
        print_success(f"Local storage readable at {kv_store.path}")
        return True

    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from ward_handover.models.base import async_session_maker

    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
            print_success("Database connection successful")
            return True
    except SQLAlchemyError as e:
        print_error(f"Database connection failed: {e}")
        return False


async def init_database() -> bool:
    """Create tables, or the key-value file's directory for the local backend."""
    from ward_handover.api.v1.deps import get_kv_store
    from ward_handover.services.storage import StorageError

    if settings.storage.backend == "local":
        try:
            await get_kv_store().initialize()
        except StorageError as e:
            print_error(f"Failed to initialize local storage: {e}")
            return False
        print_success("Local storage initialized")
        return True

    from sqlalchemy.exc import SQLAlchemyError

    from ward_handover.models.base import init_models

    try:
        await init_models()
    except SQLAlchemyError as e:
        print_error(f"Failed to initialize database: {e}")
        return False

    print_success(f"Tables created at {settings.database.url}")
    return await check_database()


async def _ensure_storage() -> None:
    if settings.storage.backend == "local":
        from ward_handover.api.v1.deps import get_kv_store

        await get_kv_store().initialize()
    else:
        from ward_handover.models.base import init_models

        await init_models()


async def seed_demo(reset: bool = False) -> int:
    """Seed (or wipe and reseed) demo data; returns patients inserted."""
    from ward_handover.api.v1.deps import open_storage
    from ward_handover.services.demo_data import reset_demo_data, seed_demo_data

    await _ensure_storage()
    async with open_storage() as storage:
        if reset:
            return await reset_demo_data(storage)
        return await seed_demo_data(storage)


async def purge_demo(dry_run: bool) -> int:
    """Delete demo patients with their notes and review entries."""
    from ward_handover.api.v1.deps import open_storage
    from ward_handover.services.demo_data import purge_demo_data

    await _ensure_storage()
    async with open_storage() as storage:
        return await purge_demo_data(storage, dry_run=dry_run)


def cmd_version(_args: argparse.Namespace) -> int:
    """Show version information."""
    print_banner()
    print(f"Version:     {settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Storage:     {settings.storage.backend}")
    print(f"Debug:       {settings.debug}")
    print(f"Python:      {sys.version.split()[0]}")
    return 0


def cmd_check_db(_args: argparse.Namespace) -> int:
    """Check storage connectivity command."""
    print_banner()
    result = asyncio.run(check_database())
    return 0 if result else 1


def cmd_init_db(_args: argparse.Namespace) -> int:
    """Initialize storage command."""
    print_banner()
    result = asyncio.run(init_database())
    return 0 if result else 1


def cmd_seed_demo(_args: argparse.Namespace) -> int:
    """Seed demo data command."""
    print_banner()
    if settings.environment == "production":
        print_error("Demo data cannot be seeded in production")
        return 1

    inserted = asyncio.run(seed_demo())
    if inserted:
        print_success(f"Seeded {inserted} demo patient(s)")
    else:
        print_info("Store already holds data, nothing seeded")
    return 0


def cmd_reset_demo(_args: argparse.Namespace) -> int:
    """Wipe and reseed command."""
    print_banner()
    if settings.environment == "production":
        print_error("Demo data cannot be reset in production")
        return 1

    inserted = asyncio.run(seed_demo(reset=True))
    print_success(f"Store reset with {inserted} demo patient(s)")
    return 0


def cmd_purge_demo(args: argparse.Namespace) -> int:
    """Purge demo patients command."""
    print_banner()
    count = asyncio.run(purge_demo(dry_run=not args.apply))
    if args.apply:
        print_success(f"Deleted {count} demo patient record(s)")
    else:
        print_info(f"[dry-run] Demo patients matched: {count}")
    return 0


def main() -> NoReturn:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ward-handover",
        description="Ward Handover CLI - Administrative command line interface",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"Ward Handover {settings.app_version}",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # version command
    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.set_defaults(func=cmd_version)

    # check-db command
    check_db_parser = subparsers.add_parser(
        "check-db",
        help="Check storage connectivity",
    )
    check_db_parser.set_defaults(func=cmd_check_db)

    # init-db command
    init_db_parser = subparsers.add_parser(
        "init-db",
        help="Create tables (sql) or the storage directory (local)",
    )
    init_db_parser.set_defaults(func=cmd_init_db)

    # seed-demo command
    seed_parser = subparsers.add_parser(
        "seed-demo",
        help="Seed demo data into an empty store",
    )
    seed_parser.set_defaults(func=cmd_seed_demo)

    # reset-demo command
    reset_parser = subparsers.add_parser(
        "reset-demo",
        help="Wipe every record and reseed demo data",
    )
    reset_parser.set_defaults(func=cmd_reset_demo)

    # purge-demo command
    purge_parser = subparsers.add_parser(
        "purge-demo",
        help="Delete demo patients and their records",
    )
    purge_parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply deletions (default is dry-run).",
    )
    purge_parser.set_defaults(func=cmd_purge_demo)

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Execute command
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
