"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g

from canvasfriends.errors import NotAuthenticated


def login_required(f):
    """Reject the request unless a verified identity is attached to it.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get("user") is None:
            raise NotAuthenticated()
        return f(*args, **kwargs)

    return decorated_function
