"""AllInTown maintenance CLI.

Usage:
    python src/manage.py ensure-indexes     # Create the indexes every collection relies on
    python src/manage.py reconcile-carts    # Finish cart clears left pending by order placement
"""

import argparse
import sys

from shared.logging import configure_logging


def ensure_all_indexes():
    from shared.database import ensure_indexes, get_db

    print("Creating indexes...")
    ensure_indexes(get_db())
    print("Done.")


def reconcile_carts(limit=None):
    from ordering.order.reconciliation import reconcile_cart_clears
    from shared.database import get_db

    completed = reconcile_cart_clears(get_db(), limit=limit)
    print(f"Cart clears completed for {completed} order(s).")
    return completed


def main(argv=None):
    parser = argparse.ArgumentParser(description="AllInTown maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ensure-indexes", help="Create all collection indexes")

    reconcile_parser = subparsers.add_parser("reconcile-carts", help="Clear carts for orders whose clear did not finish")
    reconcile_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of orders to process (default: all)",
    )

    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "ensure-indexes":
        ensure_all_indexes()
    elif args.command == "reconcile-carts":
        reconcile_carts(args.limit)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
