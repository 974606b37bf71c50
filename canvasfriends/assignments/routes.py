"""Routes for the assignments blueprint."""

from firebase_admin import firestore
from flask import Blueprint, current_app, g, jsonify, request

from canvasfriends.auth.decorators import login_required
from canvasfriends.canvas import sanitize_assignments
from canvasfriends.errors import ValidationError
from canvasfriends.user.services import sync_assignments
from canvasfriends.utils import jsonify_result

from .services import get_friend_assignments, get_friend_timeline

bp = Blueprint("assignments", __name__, url_prefix="/assignments")


def _records_from_payload(payload):
    """Pick sanitized assignments or raw planner items out of a sync body."""
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object.")
    if "planner_items" in payload:
        items = payload["planner_items"]
        if not isinstance(items, list):
            raise ValidationError("planner_items must be a list.")
        return sanitize_assignments(items)
    records = payload.get("assignments")
    if not isinstance(records, list):
        raise ValidationError("assignments must be a list.")
    return records


@bp.route("/sync", methods=["POST"])
@login_required
def sync():
    """Replace the signed-in user's shared assignments."""
    records = _records_from_payload(request.get_json(silent=True))
    result = sync_assignments(firestore.client(), g.user["uid"], records)
    return jsonify_result(result)


@bp.route("/friends", methods=["GET"])
@login_required
def friends():
    """Group-mates' assignments, one entry per member."""
    entries = get_friend_assignments(
        firestore.client(),
        g.user["uid"],
        repair_dangling=current_app.config["REPAIR_DANGLING_MEMBERSHIPS"],
    )
    return jsonify({"success": True, "friends": entries})


@bp.route("/friends/timeline", methods=["GET"])
@login_required
def timeline():
    """Group-mates' assignments as one list ordered by due date."""
    assignments = get_friend_timeline(
        firestore.client(),
        g.user["uid"],
        repair_dangling=current_app.config["REPAIR_DANGLING_MEMBERSHIPS"],
    )
    return jsonify({"success": True, "assignments": assignments})
