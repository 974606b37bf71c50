"""
Pull upcoming assignments from Canvas and share them for one user.

The Canvas access token is read from the environment and never stored.
"""

from __future__ import annotations

import argparse
import os
import sys

from firebase_admin import firestore

from canvasfriends import create_app
from canvasfriends.canvas import CanvasAPIError, CanvasClient
from canvasfriends.user.services import sync_assignments


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parses the command line."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--uid", required=True, help="Firebase uid to sync for.")
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="How many days ahead to fetch (defaults to CANVAS_LOOKAHEAD_DAYS).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Fetches, sanitizes and stores the user's upcoming assignments."""
    args = parse_args(argv)
    base_url = os.environ.get("CANVAS_URL")
    token = os.environ.get("CANVAS_TOKEN")
    if not base_url or not token:
        print("Error: CANVAS_URL and CANVAS_TOKEN environment variables must be set.")
        return 1

    app = create_app()
    with app.app_context():
        client = CanvasClient(base_url, token, timeout=app.config["CANVAS_TIMEOUT"])
        days = args.days or app.config["CANVAS_LOOKAHEAD_DAYS"]
        try:
            assignments = client.fetch_upcoming_assignments(days)
        except CanvasAPIError as e:
            print(f"Error: {e}")
            return 1

        print(f"Fetched {len(assignments)} assignments due in the next {days} days.")
        result = sync_assignments(firestore.client(), args.uid, assignments)
        if not result["success"]:
            print(f"Sync failed ({result['code']}): {result['error']}")
            return 1

    print(f"Synced {result['count']} assignments at {result['lastSync']}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
