"""
Image service — Unsplash photo search for article artwork.

  - search_images(): several landscape results for a query
  - find_image(): best single match for a free-text description
"""
import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class ImageAPIError(Exception):
    """Raised when Unsplash returns an error or is unreachable."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ImageNotFoundError(ImageAPIError):
    """Raised when a search returns no photos."""


def _photo_to_dict(photo):
    urls = photo.get("urls") or {}
    user = photo.get("user") or {}
    links = photo.get("links") or {}
    return {
        "url": urls.get("regular"),
        "thumbnail": urls.get("small"),
        "fullSize": urls.get("full"),
        "photographer": user.get("name"),
        "photographerUrl": (user.get("links") or {}).get("html"),
        "description": photo.get("description") or photo.get("alt_description"),
        "unsplashLink": links.get("html"),
        "downloadLocation": links.get("download_location"),
    }


def _search(query, per_page):
    access_key = current_app.config.get("UNSPLASH_ACCESS_KEY") or ""
    api_url = current_app.config.get("UNSPLASH_API_URL") or ""
    if not access_key:
        raise ImageAPIError("UNSPLASH_ACCESS_KEY is not configured")

    try:
        resp = requests.get(
            api_url,
            params={
                "query": query,
                "page": 1,
                "per_page": per_page,
                "orientation": "landscape",
            },
            headers={"Authorization": f"Client-ID {access_key}"},
            timeout=15,
        )
    except requests.Timeout:
        logger.error("[ERR] Unsplash timeout")
        raise ImageAPIError("Unsplash request timed out", status_code=408)
    except requests.ConnectionError:
        logger.error("[ERR] Unsplash connection failed")
        raise ImageAPIError("Could not connect to Unsplash", status_code=503)

    if resp.status_code != 200:
        logger.error("[ERR] Unsplash HTTP %d: %s", resp.status_code, resp.text[:200])
        raise ImageAPIError(
            f"Unsplash returned HTTP {resp.status_code}",
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
        results = data["results"]
    except (KeyError, TypeError, ValueError) as exc:
        logger.error("[ERR] Unsplash malformed response: %s", exc)
        raise ImageAPIError("Malformed response from Unsplash")

    return results, data.get("total") or len(results)


def search_images(query, count=5):
    """
    Search Unsplash and return up to `count` landscape photos.

    Returns:
        dict with images (list) and total.

    Raises:
        ImageNotFoundError: when nothing matches.
        ImageAPIError: on HTTP or config failures.
    """
    results, total = _search(query, count)
    if not results:
        raise ImageNotFoundError("No images found for this query")

    logger.info("[OK] Unsplash search '%s': %d results", query, len(results))
    return {"images": [_photo_to_dict(p) for p in results], "total": total}


def description_keywords(description):
    """Words longer than 3 characters, first 5, joined by spaces."""
    words = [w for w in (description or "").split(" ") if len(w) > 3]
    return " ".join(words[:5])


def find_image(description):
    """Return the best Unsplash match for a free-text image description."""
    query = description_keywords(description) or description
    results, _ = _search(query, 10)
    if not results:
        raise ImageNotFoundError("No images found for this description")

    logger.info("[OK] Unsplash best match for '%s'", query)
    return _photo_to_dict(results[0])
