#!/usr/bin/env python3
"""
Load the legislator roster and agendas, check database integrity.

Usage:
    python load_data.py --roster legislators.csv             # Import/refresh the registry
    python load_data.py --agenda agenda.csv --code S-2026-14 # Create a prepared session
    python load_data.py --agenda agenda.json --code S-14 --quorum 11 --role secretariat
    python load_data.py --validate                           # Check chamber invariants
    python load_data.py --drain                              # Publish pending notifications
"""

import argparse
import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from app.container import container  # noqa: E402
from app.errors import CoordinatorError  # noqa: E402
from app.repositories import get_db  # noqa: E402
from app.services.permissions import Actor  # noqa: E402
from etl import import_roster, read_agenda, validate_chamber  # noqa: E402
from settings import DB_PATH  # noqa: E402
from settings.logging import setup_logging  # noqa: E402

logger = setup_logging(level="INFO", to_file=True)


def run_validation() -> bool:
    """Validate the chamber database."""
    result = validate_chamber(get_db())

    print("\n" + "=" * 60)
    print("CHAMBER VALIDATION REPORT")
    print("=" * 60)
    print(f"  Database: {DB_PATH}")
    print(f"  Active legislators: {result['stats']['legislators']:,}")
    print(f"  Active sessions: {result['stats']['active_sessions']}")
    print(f"  Votes: {result['stats']['votes']:,}")
    print(f"  Pending events: {result['stats']['pending_events']}")
    for issue in result["issues"]:
        print(f"  ⚠️  {issue}")

    print("\n" + "=" * 60)
    if result["valid"]:
        print("✅ All data valid!")
    else:
        print("❌ Some issues found.")
    print("=" * 60 + "\n")
    return result["valid"]


def load_agenda(path: str, code: str, quorum: int | None, role: str) -> bool:
    items = read_agenda(path)
    try:
        session, initiatives = container.coordinator.load_agenda(Actor(role=role), code, items, quorum)
    except CoordinatorError as e:
        logger.error("Agenda rejected ({}): {} {}", e.kind, e.message, e.context)
        return False
    logger.info("Session {} (id {}) prepared with {} initiatives", session.code, session.id, len(initiatives))
    return True


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--roster", help="CSV/JSON legislator roster")
    parser.add_argument("--agenda", help="CSV/JSON agenda of a new session")
    parser.add_argument("--code", help="Session code for --agenda")
    parser.add_argument("--quorum", type=int, help="Session quorum (default: majority of active legislators)")
    parser.add_argument("--role", default="operator", help="Role loading the agenda")
    parser.add_argument("--validate", action="store_true", help="Check chamber invariants")
    parser.add_argument("--drain", action="store_true", help="Publish pending notifications")
    args = parser.parse_args()

    if not any([args.roster, args.agenda, args.validate, args.drain]):
        parser.print_help()
        sys.exit(1)

    if args.agenda and not args.code:
        parser.error("--agenda requires --code")

    container.init()
    ok = True
    try:
        if args.roster:
            import_roster(get_db(), args.roster)

        if args.agenda:
            ok = load_agenda(args.agenda, args.code, args.quorum, args.role) and ok

        if args.drain:
            logger.info("Published {} pending events", container.coordinator.relay.drain())

        if args.validate:
            ok = run_validation() and ok
    finally:
        container.reset()

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
