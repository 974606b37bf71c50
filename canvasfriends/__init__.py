"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, current_app, g, request
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import CANVAS_LOOKAHEAD_DAYS, CANVAS_TIMEOUT, MAX_GROUP_CODE_ATTEMPTS
from .extensions import notifier


def _env_flag(name, default="false"):
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def init_firebase(app):
    """Initialize the Firebase Admin SDK from the environment or a local file."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = app.config.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        try:
            options = {"projectId": project_id} if project_id else None
            firebase_admin.initialize_app(cred, options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        MAX_GROUP_CODE_ATTEMPTS=int(
            os.environ.get("MAX_GROUP_CODE_ATTEMPTS") or MAX_GROUP_CODE_ATTEMPTS
        ),
        # Repair a user's own group list when it points at missing groups
        REPAIR_DANGLING_MEMBERSHIPS=_env_flag("REPAIR_DANGLING_MEMBERSHIPS"),
        CANVAS_TIMEOUT=float(os.environ.get("CANVAS_TIMEOUT") or CANVAS_TIMEOUT),
        CANVAS_LOOKAHEAD_DAYS=int(
            os.environ.get("CANVAS_LOOKAHEAD_DAYS") or CANVAS_LOOKAHEAD_DAYS
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        init_firebase(app)

    # Initialize extensions
    notifier.init_app(app)

    # Register blueprints
    from .auth.routes import bp as auth_bp

    app.register_blueprint(auth_bp)

    from .group.routes import bp as group_bp

    app.register_blueprint(group_bp)

    from .assignments.routes import bp as assignments_bp

    app.register_blueprint(assignments_bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    from .auth.utils import TOKEN_ERRORS, get_bearer_token, verify_identity

    @app.before_request
    def load_authenticated_user():
        """If a bearer ID token is present, verify it and store the identity in g."""
        g.user = None
        id_token = get_bearer_token(request)
        if id_token is None:
            return

        try:
            g.user = verify_identity(id_token)
        except TOKEN_ERRORS as e:
            current_app.logger.warning(f"Rejected ID token: {e}")

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app


__all__ = ["create_app"]
