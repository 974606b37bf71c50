"""Utility functions for request authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import auth

if TYPE_CHECKING:
    from flask import Request

    from canvasfriends.user.models import Identity

# Errors meaning the caller's token cannot be trusted.
TOKEN_ERRORS = (
    auth.InvalidIdTokenError,
    auth.CertificateFetchError,
    auth.UserDisabledError,
    ValueError,
)


def get_bearer_token(request: Request) -> str | None:
    """Extract the bearer token from the Authorization header."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def verify_identity(id_token: str) -> Identity:
    """Verify a Firebase ID token and return the identity it carries."""
    decoded = auth.verify_id_token(id_token)
    return {
        "uid": decoded["uid"],
        "email": decoded.get("email", ""),
        "name": decoded.get("name", ""),
    }
