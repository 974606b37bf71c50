"""Routes for the group blueprint."""

from firebase_admin import firestore
from flask import Blueprint, current_app, g, jsonify, request

from canvasfriends.auth.decorators import login_required
from canvasfriends.errors import ValidationError
from canvasfriends.user.services import get_groups
from canvasfriends.utils import first_form_error, jsonify_result

from .forms import GroupForm, JoinGroupForm
from .services import create_group, get_group, join_group, leave_group

bp = Blueprint("group", __name__, url_prefix="/groups")


def _require_json_object():
    """Reject JSON bodies that are not objects before a form reads them."""
    if request.is_json and not isinstance(request.get_json(silent=True), dict):
        raise ValidationError("Expected a JSON object.")


@bp.route("/", methods=["GET"])
@login_required
def view_groups():
    """List the groups the signed-in user belongs to."""
    groups = get_groups(firestore.client(), g.user["uid"])
    return jsonify({"success": True, "groups": groups})


@bp.route("/", methods=["POST"])
@login_required
def create():
    """Create a new group with the signed-in user as its first member."""
    _require_json_object()
    form = GroupForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
    result = create_group(
        firestore.client(),
        g.user["uid"],
        form.name.data,
        max_attempts=current_app.config["MAX_GROUP_CODE_ATTEMPTS"],
    )
    return jsonify_result(result, 201)


@bp.route("/join", methods=["POST"])
@login_required
def join():
    """Join a group by its code."""
    _require_json_object()
    form = JoinGroupForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
    result = join_group(firestore.client(), g.user["uid"], form.code.data)
    return jsonify_result(result)


@bp.route("/<string:code>", methods=["GET"])
@login_required
def view_group(code):
    """Show one group to one of its members."""
    return jsonify_result(get_group(firestore.client(), g.user["uid"], code))


@bp.route("/<string:code>/leave", methods=["POST"])
@login_required
def leave(code):
    """Leave a group."""
    return jsonify_result(leave_group(firestore.client(), g.user["uid"], code))
