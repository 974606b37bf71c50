"""Routes for the auth blueprint."""

from firebase_admin import firestore
from flask import Blueprint, current_app, g, jsonify

from canvasfriends.errors import NotFoundError
from canvasfriends.extensions import notifier
from canvasfriends.user.services import ensure_user, get_user

from .decorators import login_required

bp = Blueprint("auth", __name__, url_prefix="/auth")


@bp.route("/session", methods=["POST"])
@login_required
def session_login():
    """
    Called by the client after a successful Firebase sign-in.
    Creates the user document on first sign-in and returns it.
    """
    db = firestore.client()
    uid = g.user["uid"]
    created = ensure_user(db, uid, g.user.get("email"), g.user.get("name"))
    return jsonify({"success": True, "created": created, "user": get_user(db, uid)})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    """Return the signed-in user's document."""
    user = get_user(firestore.client(), g.user["uid"])
    if user is None:
        raise NotFoundError("User not found.")
    return jsonify({"success": True, "user": user})


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    """
    The actual sign-out is handled by the Firebase client-side SDK.
    This route tears down the user's live assignment subscriptions.
    """
    closed = notifier.unsubscribe_user(g.user["uid"])
    current_app.logger.info(f"Closed {closed} subscriptions for {g.user['uid']}")
    return jsonify({"success": True, "closed_subscriptions": closed})
