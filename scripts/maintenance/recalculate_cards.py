"""
Recalculate every card's schedule under the current retention target.

Replays each card's review log from scratch; cards that were never
reviewed keep their creation-based due date.

Usage:
    python -m scripts.maintenance.recalculate_cards
    python -m scripts.maintenance.recalculate_cards --yes
"""

import argparse
import sys

from revision import config
from revision.database import close_client
from revision.errors import RevisionError
from revision.factory import build_services


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Rebuild every reviewed card's schedule under the current retention target"
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config.configure_logging()

    try:
        services = build_services()
        retention = services.settings.get_retention_target()

        print("=" * 60)
        print("Recalculate Card Schedules")
        print("=" * 60)
        print()
        print(f"Database:         {config.get_database_name()}")
        print(f"Retention target: {retention:.2f}")
        print()
        print("Every reviewed card's due date will be rebuilt from its review log.")
        print()

        if not args.yes:
            response = input("Continue? (type 'yes' to confirm): ")
            if response.lower() != "yes":
                print("\nCancelled. No changes made.")
                return 0

        print("\nRecalculating...")
        result = services.reviews.recalculate_all()
    except RevisionError as exc:
        print(f"✗ Recalculation failed: {exc}")
        return 1
    finally:
        close_client()

    print(f"✓ Updated {result.updated} of {result.total} cards.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
