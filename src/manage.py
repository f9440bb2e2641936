"""Review bot management CLI.

Creates and drops the review tables and prints review statistics.
Reuses the setup_db/drop_db utilities of the reviews domain.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py stats      # Print review totals and distribution
"""

import argparse
import sys


def _domain():
    from reviews.domain import reviews

    print("Initializing reviews domain...")
    reviews.init()
    return reviews


def setup_database():
    """Create the database schema for the reviews domain."""
    from reviews.utils.db import setup_db

    domain = _domain()
    print("Creating reviews database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the database schema for the reviews domain."""
    from reviews.utils.db import drop_db

    domain = _domain()
    print("Dropping reviews database schema...")
    drop_db(domain)
    print("Done.")


def print_stats():
    """Print the total, average and distribution of stored reviews."""
    from reviews.review.lookup import review_stats

    domain = _domain()
    with domain.domain_context():
        stats = review_stats()

    print(f"Total reviews:  {stats.total}")
    print(f"Average rating: {stats.average_rating:.2f}")
    for score, count in stats.distribution.items():
        print(f"  {'*' * score:<5} {count}")


def main():
    parser = argparse.ArgumentParser(description="Review bot database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("stats", help="Print review statistics")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "stats":
        print_stats()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
