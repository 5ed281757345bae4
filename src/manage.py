"""Checkout service database management CLI.

Creates or drops the SQL schema of the ordering domain. With the default
in-memory provider there is nothing to create and both commands say so.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def _domain():
    from ordering.domain import ordering

    print("Initializing ordering domain...")
    ordering.init()
    return ordering


def setup_databases() -> int:
    from ordering.utils.db import setup_db

    domain = _domain()
    print("Creating ordering database schema...")
    touched = setup_db(domain)
    if touched:
        print("  ordering schema ready.")
    else:
        print("  no SQL provider configured, nothing to create.")
    print("Done.")
    return touched


def drop_databases() -> int:
    from ordering.utils.db import drop_db

    domain = _domain()
    print("Dropping ordering database schema...")
    touched = drop_db(domain)
    if touched:
        print("  ordering schema dropped.")
    else:
        print("  no SQL provider configured, nothing to drop.")
    print("Done.")
    return touched


def main(argv=None):
    parser = argparse.ArgumentParser(description="Checkout service database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
