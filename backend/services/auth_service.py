"""
Auth service — password and Google sign-in, user management, JWT.

Handles the full login flow:
  1. Local accounts: register with hashed password, verify credentials
  2. Google accounts: verify ID token, domain check, find or create user
  3. First user in an empty database becomes ADMIN
  4. Issue/decode JWT session tokens
"""
import logging
import re
from datetime import datetime, timezone, timedelta

import jwt
from flask import current_app
from google.oauth2 import id_token
from google.auth.transport import requests as google_requests
from werkzeug.security import generate_password_hash, check_password_hash

from models import db
from models.user import User

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = ("WRITER", "EDITOR")
MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthError(Exception):
    """Raised when registration or login cannot proceed."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.status_code = status_code


def normalize_email(email):
    return (email or "").strip().lower()


def is_valid_email(email):
    return bool(_EMAIL_RE.match(email or ""))


def _require_strings(**fields):
    """Reject JSON numbers, lists or objects where text is expected."""
    for key, value in fields.items():
        if value is not None and not isinstance(value, str):
            raise AuthError(f"{key} must be a string")


def _initial_role(requested):
    """First user in the system is ADMIN, everyone else gets what they asked for."""
    if User.query.count() == 0:
        return "ADMIN"
    return requested


def register_user(email, password, name, role=None):
    """
    Create a local account.

    Raises:
        AuthError: 400 on invalid input, 409 if the email is taken.
    """
    _require_strings(email=email, password=password, name=name, role=role)
    email = normalize_email(email)
    name = (name or "").strip()
    role = (role or "WRITER").strip().upper()

    if not is_valid_email(email):
        raise AuthError("A valid email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not name:
        raise AuthError("Name is required")
    if role not in SELF_SERVICE_ROLES:
        raise AuthError("Role must be 'WRITER' or 'EDITOR'")

    if User.query.filter_by(email=email).first():
        raise AuthError("Email already registered", status_code=409)

    user = User(
        email=email,
        password_hash=generate_password_hash(password),
        name=name,
        role=_initial_role(role),
        provider="local",
        last_login_at=datetime.now(timezone.utc),
    )
    db.session.add(user)
    db.session.commit()
    logger.info("[OK] User registered: %s (role=%s)", email, user.role)
    return user


def authenticate(email, password):
    """
    Verify email + password and return the User.

    Raises:
        AuthError: 400 for non-string input; 401 for unknown user,
            OAuth-only account, or bad password.
    """
    _require_strings(email=email, password=password)
    user = User.query.filter_by(email=normalize_email(email)).first()
    if not user or not user.password_hash:
        logger.info("[--] Login rejected for %s", email)
        raise AuthError("Invalid credentials", status_code=401)
    if not check_password_hash(user.password_hash, password or ""):
        logger.info("[--] Login rejected for %s", email)
        raise AuthError("Invalid credentials", status_code=401)

    user.last_login_at = datetime.now(timezone.utc)
    db.session.commit()
    logger.info("[OK] User logged in: %s", user.email)
    return user


def verify_google_token(id_token_str):
    """
    Validate a Google ID token and return claims.

    Returns:
        dict with keys: sub, email, name, picture
    Raises:
        ValueError: if token is invalid or expired
    """
    claims = id_token.verify_oauth2_token(
        id_token_str,
        google_requests.Request(),
        current_app.config["GOOGLE_CLIENT_ID"],
    )
    return {
        "sub": claims["sub"],
        "email": claims["email"],
        "name": claims.get("name") or "",
        "picture": claims.get("picture") or "",
    }


def get_or_create_google_user(google_claims):
    """
    Find an existing user by email or Google subject, or create one.

    Domain check applies only when ALLOWED_EMAIL_DOMAINS is configured.

    Raises:
        AuthError: 403 if email domain is not allowed
    """
    email = normalize_email(google_claims["email"])
    domain = email.split("@")[-1]
    allowed = current_app.config.get("ALLOWED_EMAIL_DOMAINS") or []
    if allowed and domain not in allowed:
        logger.error("[ERR] Invalid domain: %s", email)
        raise AuthError(f"Email domain @{domain} is not allowed", status_code=403)

    user = User.query.filter(
        db.or_(
            User.email == email,
            db.and_(User.provider == "google", User.provider_id == google_claims["sub"]),
        )
    ).first()

    if user:
        user.last_login_at = datetime.now(timezone.utc)
        db.session.commit()
        logger.info("[OK] User logged in with Google: %s", email)
        return user

    user = User(
        email=email,
        name=google_claims.get("name") or email.split("@")[0],
        avatar=google_claims.get("picture") or None,
        role=_initial_role("WRITER"),
        provider="google",
        provider_id=google_claims["sub"],
        last_login_at=datetime.now(timezone.utc),
    )
    db.session.add(user)
    db.session.commit()
    logger.info("[OK] User logged in with Google: %s (role=%s, new=True)", email, user.role)
    return user


def generate_jwt(user):
    """
    Create a signed JWT for the given user.

    Payload: sub (email), role, user_id, exp (now + JWT_EXPIRY_HOURS).
    Signed with app SECRET_KEY using HS256.
    """
    expiry_hours = current_app.config.get("JWT_EXPIRY_HOURS") or 168
    payload = {
        "sub": user.email,
        "role": user.role,
        "user_id": user.id,
        "exp": datetime.now(timezone.utc) + timedelta(hours=expiry_hours),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_jwt(token):
    """
    Decode and validate a JWT.

    Returns:
        dict of claims on success, None on failure (expired, invalid, etc.)
    """
    try:
        return jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=["HS256"],
        )
    except jwt.PyJWTError:
        return None
