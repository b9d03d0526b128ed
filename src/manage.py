"""Uniforms management CLI.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db                       # Drop all tables
    python src/manage.py void-unclaimed --days 7       # One auto-void sweep
    python src/manage.py void-unclaimed --days 3 --unconfirmed-only --every 3600
"""

import argparse
import sys
import time


def setup_database():
    from uniforms.domain import uniforms
    from uniforms.utils.db import setup_db

    print("Initializing uniforms domain...")
    uniforms.init()
    print("Creating uniforms database schema...")
    setup_db(uniforms)
    print("Done.")


def drop_database():
    from uniforms.domain import uniforms
    from uniforms.utils.db import drop_db

    print("Initializing uniforms domain...")
    uniforms.init()
    print("Dropping uniforms database schema...")
    drop_db(uniforms)
    print("Done.")


def _window(args):
    for unit in ("days", "hours", "minutes", "seconds"):
        value = getattr(args, unit)
        if value:
            return value, unit
    return 7, "days"


def void_unclaimed(args):
    """Run the auto-void sweep once, or forever every ``--every`` seconds."""
    from uniforms.domain import uniforms
    from uniforms.utils.logging import configure_logging
    from uniforms.voiding.sweep import void_unclaimed_orders

    configure_logging()
    uniforms.init()
    window, unit = _window(args)

    while True:
        with uniforms.domain_context():
            result = void_unclaimed_orders(window, unit, unconfirmed_only=args.unconfirmed_only)
        print(f"Voided {result['voided_count']} order(s).")

        if not args.every:
            break
        time.sleep(args.every)


def main():
    parser = argparse.ArgumentParser(description="Uniforms management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    void_parser = subparsers.add_parser("void-unclaimed", help="Cancel orders not claimed in time")
    window_group = void_parser.add_mutually_exclusive_group()
    window_group.add_argument("--days", type=int)
    window_group.add_argument("--hours", type=int)
    window_group.add_argument("--minutes", type=int)
    window_group.add_argument("--seconds", type=int)
    void_parser.add_argument(
        "--unconfirmed-only",
        action="store_true",
        help="Only void orders the student never confirmed",
    )
    void_parser.add_argument("--every", type=int, help="Repeat the sweep every N seconds")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "void-unclaimed":
        void_unclaimed(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
