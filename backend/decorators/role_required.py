"""
Decorator: @role_required(*roles) — enforces one of the given roles.

Wraps @login_required, then checks g.current_user.role is in roles.
Returns 403 with `message` otherwise.
"""
from functools import wraps

from flask import g, jsonify

from decorators.login_required import login_required


def role_required(*roles, message="Insufficient permissions"):
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated(*args, **kwargs):
            if g.current_user.role not in roles:
                return jsonify({"error": message}), 403
            return f(*args, **kwargs)

        return decorated

    return decorator
