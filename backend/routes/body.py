"""
Helpers for reading fields out of JSON request bodies.

A wrong JSON type raises werkzeug's BadRequest, which the app-wide
HTTPException handler turns into a 400 { "error": ... } body.
"""
from werkzeug.exceptions import BadRequest


def text_field(body, key, strip=True):
    """
    Read a string field; missing or null comes back as "".

    Raises:
        BadRequest: the value is a number, list, object or boolean.
    """
    value = body.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value.strip() if strip else value
