"""
Page fetch service — pull title and visible text from a source URL.

Used when a source is added without a title, and when the credibility
agent is asked to assess a URL without a content sample.

Fetches page HTML, extracts <title> + first N chars of visible text.
Best-effort: every failure returns None, never raises.
"""
import logging
import re
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

URL_TIMEOUT = 10  # seconds per URL fetch
PREVIEW_CHARS = 500

# Browser-like User-Agent so news sites don't 403 us
_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)


def is_http_url(url):
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def fetch_page(url, max_chars=PREVIEW_CHARS):
    """Fetch page title + first max_chars of visible body text.

    Strips scripts, styles, nav, header, and footer elements before
    extracting text.

    Returns:
        dict with title, text, url — or None on any failure.
    """
    if not is_http_url(url):
        return None

    try:
        resp = requests.get(
            url,
            timeout=URL_TIMEOUT,
            headers={"User-Agent": _USER_AGENT},
        )
        if resp.status_code != 200:
            logger.info("[--] Page fetch %d for %s", resp.status_code, url)
            return None

        soup = BeautifulSoup(resp.text, "html.parser")

        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""

        # Remove noise elements
        for tag in soup.find_all(["script", "style", "nav", "header", "footer", "noscript"]):
            tag.decompose()

        body_text = soup.get_text(separator=" ", strip=True)
        body_text = re.sub(r'\s+', ' ', body_text).strip()

        logger.info("[OK] Fetched page: %s", url)
        return {
            "title": title,
            "text": body_text[:max_chars],
            "url": url,
        }
    except requests.RequestException as exc:
        logger.info("[--] Page fetch error for %s: %s", url, exc)
        return None
