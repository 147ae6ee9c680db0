"""Utility script to create the notification tables and register every kind."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from collabnotify.infrastructure.database import SessionLocal, initialize_database
from collabnotify.infrastructure.repositories import NotificationRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for kind registration."""

    parser = argparse.ArgumentParser(
        description="Create notification tables and seed the notification kind lookup table.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress messages at INFO level.",
    )
    return parser.parse_args()


def main() -> None:
    """Register every notification kind known to this version."""

    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    initialize_database()

    session = SessionLocal()
    try:
        kinds = NotificationRepository(session).initialize_kinds()
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not register notification kinds: {exc}") from exc
    else:
        print("Registered notification kinds:")
        for name, kind_id in sorted(kinds.items(), key=lambda item: item[1]):
            print(f"  {kind_id}: {name}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
