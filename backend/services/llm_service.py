"""
LLM service — calls the OpenAI and Groq chat completions endpoints.

Both providers speak the same chat completions protocol, so one request
path serves both. complete() tries OpenAI first and falls back to Groq;
if both fail the combined error is raised.

Wraps each provider with error handling for:
  - Missing API key
  - HTTP errors (rate limits, server errors)
  - Timeouts
  - Malformed responses

Also exposes generate_dalle_image() for the OpenAI images endpoint.
"""
import logging
import time

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class LLMAPIError(Exception):
    """Raised when an LLM provider returns an error or is unreachable."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def _provider_settings(provider):
    cfg = current_app.config
    if provider == "openai":
        return cfg.get("OPENAI_API_KEY") or "", cfg.get("OPENAI_API_URL") or "", "OpenAI"
    return cfg.get("GROQ_API_KEY") or "", cfg.get("GROQ_API_URL") or "", "Groq"


def call_chat(provider, messages, model, temperature=0.7, max_tokens=2000,
              json_mode=False):
    """
    Send a chat completion request to one provider.

    Args:
        provider: 'openai' or 'groq'.
        messages: chat messages (role/content dicts).
        model: model name for that provider.
        json_mode: ask for a JSON object response (OpenAI only).

    Returns:
        tuple (content, usage) where usage is the provider's usage dict.

    Raises:
        LLMAPIError: On missing key, HTTP error, timeout, or bad response.
    """
    api_key, api_url, label = _provider_settings(provider)
    timeout = current_app.config.get("LLM_TIMEOUT_SECONDS") or 60

    if not api_key:
        raise LLMAPIError(f"{label} API key is not configured")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode and provider == "openai":
        payload["response_format"] = {"type": "json_object"}

    start_ms = int(time.time() * 1000)

    try:
        resp = requests.post(
            api_url,
            json=payload,
            headers=headers,
            timeout=timeout,
        )
    except requests.Timeout:
        logger.error("[ERR] %s API timeout after %ds", label, timeout)
        raise LLMAPIError(f"{label} API request timed out", status_code=408)
    except requests.ConnectionError:
        logger.error("[ERR] %s API connection failed", label)
        raise LLMAPIError(f"Could not connect to {label} API", status_code=503)

    duration_ms = int(time.time() * 1000) - start_ms

    if resp.status_code == 429:
        logger.error("[ERR] %s API rate limited", label)
        raise LLMAPIError(f"{label} API rate limit exceeded", status_code=429)

    if resp.status_code != 200:
        logger.error(
            "[ERR] %s API HTTP %d: %s", label, resp.status_code, resp.text[:200]
        )
        raise LLMAPIError(
            f"{label} API returned HTTP {resp.status_code}",
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error("[ERR] %s API malformed response: %s", label, exc)
        raise LLMAPIError(f"Malformed response from {label} API")

    logger.info(
        "[OK] %s API call completed in %dms (model=%s)", label, duration_ms, model
    )
    return content or "", data.get("usage") or {}


def complete(system, prompt, temperature=0.7, max_tokens=2000, model=None,
             json_mode=False, postprocess=None):
    """
    Run a system + user prompt, OpenAI first, Groq on any failure.

    Args:
        model: OpenAI model override (defaults to OPENAI_MODEL).
        postprocess: optional callable applied to each provider's text.
            A ValueError from it on the OpenAI reply also triggers the
            Groq fallback; on the Groq reply it propagates.

    Returns:
        tuple (result, usage). result is the text, or postprocess(text).
        usage is OpenAI's usage dict, or {"provider": "groq"} when the
        fallback answered.

    Raises:
        LLMAPIError: when both providers fail.
    """
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]
    openai_model = model or current_app.config.get("OPENAI_MODEL") or "gpt-4"

    try:
        text, usage = call_chat(
            "openai", messages, openai_model,
            temperature=temperature, max_tokens=max_tokens, json_mode=json_mode,
        )
        return (postprocess(text) if postprocess else text), usage
    except (LLMAPIError, ValueError) as openai_exc:
        logger.warning("[--] OpenAI failed, trying Groq: %s", openai_exc)
        groq_model = current_app.config.get("GROQ_MODEL") or "llama-3.3-70b-versatile"
        try:
            text, _ = call_chat(
                "groq", messages, groq_model,
                temperature=temperature, max_tokens=max_tokens,
            )
        except LLMAPIError as groq_exc:
            raise LLMAPIError(
                f"{openai_exc} | Groq fallback error: {groq_exc}",
                status_code=groq_exc.status_code or getattr(openai_exc, "status_code", None),
            )
        return (postprocess(text) if postprocess else text), {"provider": "groq"}


def generate_dalle_image(prompt, size="1792x1024"):
    """
    Generate one image with DALL-E 3.

    Returns:
        dict with url and revisedPrompt.

    Raises:
        LLMAPIError: On missing key, HTTP error, timeout, or bad response.
    """
    api_key = current_app.config.get("OPENAI_API_KEY") or ""
    api_url = current_app.config.get("OPENAI_IMAGE_URL") or ""
    timeout = current_app.config.get("LLM_TIMEOUT_SECONDS") or 60

    if not api_key:
        raise LLMAPIError("OpenAI API key is not configured")

    payload = {
        "model": "dall-e-3",
        "prompt": prompt,
        "n": 1,
        "size": size,
        "quality": "standard",
    }

    try:
        resp = requests.post(
            api_url,
            json=payload,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )
    except requests.Timeout:
        logger.error("[ERR] DALL-E timeout after %ds", timeout)
        raise LLMAPIError("OpenAI image request timed out", status_code=408)
    except requests.ConnectionError:
        logger.error("[ERR] DALL-E connection failed")
        raise LLMAPIError("Could not connect to OpenAI API", status_code=503)

    if resp.status_code != 200:
        logger.error("[ERR] DALL-E HTTP %d: %s", resp.status_code, resp.text[:200])
        raise LLMAPIError(
            f"OpenAI images API returned HTTP {resp.status_code}",
            status_code=resp.status_code,
        )

    try:
        image = resp.json()["data"][0]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error("[ERR] DALL-E malformed response: %s", exc)
        raise LLMAPIError("Malformed response from OpenAI images API")

    logger.info("[OK] DALL-E image generated")
    return {"url": image.get("url"), "revisedPrompt": image.get("revised_prompt")}
