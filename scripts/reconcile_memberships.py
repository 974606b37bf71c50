"""
Repair the group lists of every user against the groups' member lists.

Safe to re-run: a second pass over consistent data changes nothing.
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from firebase_admin import firestore

from canvasfriends import create_app
from canvasfriends.constants import USERS_COLLECTION
from canvasfriends.group.services import reconcile_user_memberships

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def reconcile_all(db: Client, dry_run: bool = False) -> tuple[int, int]:
    """Reconciles every user. Returns (users repaired, users failed)."""
    repaired = 0
    failed = 0
    for user_doc in db.collection(USERS_COLLECTION).stream():
        uid = user_doc.id
        if dry_run:
            print(f"Would reconcile {uid}")
            continue

        result = reconcile_user_memberships(db, uid)
        if not result["success"]:
            print(f"  {uid}: {result['error']}")
            failed += 1
            continue
        if result["removed"] or result["restored"]:
            print(
                f"  {uid}: removed {result['removed']}, restored {result['restored']}"
            )
            repaired += 1
    return repaired, failed


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dry-run", action="store_true", help="List users without writing."
    )
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        repaired, failed = reconcile_all(firestore.client(), dry_run=args.dry_run)

    print(f"Reconciliation complete: {repaired} repaired, {failed} failed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
