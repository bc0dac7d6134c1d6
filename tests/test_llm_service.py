"""
Tests for services/llm_service.py — OpenAI/Groq calls and the fallback chain.

All HTTP calls are mocked at services.llm_service.requests.post.
"""
from unittest.mock import patch

import pytest
import requests

from services.llm_service import LLMAPIError, call_chat, complete, generate_dalle_image
from conftest import mock_response, chat_response


MESSAGES = [{"role": "user", "content": "hi"}]


class TestCallChat:
    """Tests for call_chat() against one provider."""

    @patch("services.llm_service.requests.post")
    def test_success_returns_content_and_usage(self, mock_post, app):
        mock_post.return_value = chat_response("hello", {"total_tokens": 7})
        with app.app_context():
            content, usage = call_chat("openai", MESSAGES, "gpt-4")
        assert content == "hello"
        assert usage == {"total_tokens": 7}

    @patch("services.llm_service.requests.post")
    def test_json_mode_sets_response_format_for_openai(self, mock_post, app):
        mock_post.return_value = chat_response("{}")
        with app.app_context():
            call_chat("openai", MESSAGES, "gpt-4", json_mode=True)
        payload = mock_post.call_args.kwargs["json"]
        assert payload["response_format"] == {"type": "json_object"}

    @patch("services.llm_service.requests.post")
    def test_json_mode_ignored_for_groq(self, mock_post, app):
        mock_post.return_value = chat_response("{}")
        with app.app_context():
            call_chat("groq", MESSAGES, "llama", json_mode=True)
        assert "response_format" not in mock_post.call_args.kwargs["json"]
        assert mock_post.call_args.args[0] == app.config["GROQ_API_URL"]

    @patch("services.llm_service.requests.post")
    def test_rate_limit(self, mock_post, app):
        mock_post.return_value = mock_response(429)
        with app.app_context():
            with pytest.raises(LLMAPIError) as exc_info:
                call_chat("openai", MESSAGES, "gpt-4")
        assert exc_info.value.status_code == 429

    @patch("services.llm_service.requests.post")
    def test_server_error(self, mock_post, app):
        mock_post.return_value = mock_response(500, text="boom")
        with app.app_context():
            with pytest.raises(LLMAPIError) as exc_info:
                call_chat("openai", MESSAGES, "gpt-4")
        assert exc_info.value.status_code == 500

    @patch("services.llm_service.requests.post")
    def test_timeout(self, mock_post, app):
        mock_post.side_effect = requests.Timeout()
        with app.app_context():
            with pytest.raises(LLMAPIError) as exc_info:
                call_chat("groq", MESSAGES, "llama")
        assert exc_info.value.status_code == 408

    @patch("services.llm_service.requests.post")
    def test_connection_error(self, mock_post, app):
        mock_post.side_effect = requests.ConnectionError()
        with app.app_context():
            with pytest.raises(LLMAPIError) as exc_info:
                call_chat("openai", MESSAGES, "gpt-4")
        assert exc_info.value.status_code == 503

    @patch("services.llm_service.requests.post")
    def test_malformed_response(self, mock_post, app):
        mock_post.return_value = mock_response(200, {"choices": []})
        with app.app_context():
            with pytest.raises(LLMAPIError, match="Malformed"):
                call_chat("openai", MESSAGES, "gpt-4")

    def test_missing_key(self, app):
        with app.app_context():
            original = app.config["OPENAI_API_KEY"]
            app.config["OPENAI_API_KEY"] = ""
            try:
                with pytest.raises(LLMAPIError, match="not configured"):
                    call_chat("openai", MESSAGES, "gpt-4")
            finally:
                app.config["OPENAI_API_KEY"] = original


class TestComplete:
    """Tests for complete() — OpenAI first, Groq fallback."""

    @patch("services.llm_service.requests.post")
    def test_openai_answers(self, mock_post, app):
        mock_post.return_value = chat_response("from openai", {"total_tokens": 3})
        with app.app_context():
            text, usage = complete("sys", "prompt")
        assert text == "from openai"
        assert usage == {"total_tokens": 3}
        assert mock_post.call_count == 1
        assert mock_post.call_args.kwargs["json"]["model"] == app.config["OPENAI_MODEL"]

    @patch("services.llm_service.requests.post")
    def test_model_override(self, mock_post, app):
        mock_post.return_value = chat_response("ok")
        with app.app_context():
            complete("sys", "prompt", model="gpt-4-turbo-preview")
        assert mock_post.call_args.kwargs["json"]["model"] == "gpt-4-turbo-preview"

    @patch("services.llm_service.requests.post")
    def test_falls_back_to_groq(self, mock_post, app):
        mock_post.side_effect = [mock_response(500), chat_response("from groq")]
        with app.app_context():
            text, usage = complete("sys", "prompt")
        assert text == "from groq"
        assert usage == {"provider": "groq"}
        second = mock_post.call_args_list[1]
        assert second.kwargs["json"]["model"] == app.config["GROQ_MODEL"]

    @patch("services.llm_service.requests.post")
    def test_both_fail(self, mock_post, app):
        mock_post.side_effect = [mock_response(500), requests.Timeout()]
        with app.app_context():
            with pytest.raises(LLMAPIError) as exc_info:
                complete("sys", "prompt")
        message = str(exc_info.value)
        assert "OpenAI API returned HTTP 500" in message
        assert "Groq fallback error" in message
        assert exc_info.value.status_code == 408


class TestDalle:
    """Tests for generate_dalle_image()."""

    @patch("services.llm_service.requests.post")
    def test_returns_url_and_revised_prompt(self, mock_post, app):
        mock_post.return_value = mock_response(200, {
            "data": [{"url": "https://img.test/1.png", "revised_prompt": "a city"}],
        })
        with app.app_context():
            image = generate_dalle_image("city hall")
        assert image == {"url": "https://img.test/1.png", "revisedPrompt": "a city"}
        assert mock_post.call_args.kwargs["json"]["model"] == "dall-e-3"

    @patch("services.llm_service.requests.post")
    def test_http_error(self, mock_post, app):
        mock_post.return_value = mock_response(400, text="policy")
        with app.app_context():
            with pytest.raises(LLMAPIError):
                generate_dalle_image("city hall")


class TestCompletePostprocess:
    """Tests for complete(postprocess=...)."""

    @patch("services.llm_service.requests.post")
    def test_postprocess_applied_to_openai_reply(self, mock_post, app):
        mock_post.return_value = chat_response("  padded  ", {"total_tokens": 2})
        with app.app_context():
            result, usage = complete("sys", "prompt", postprocess=str.strip)
        assert result == "padded"
        assert usage == {"total_tokens": 2}
        assert mock_post.call_count == 1

    @patch("services.llm_service.requests.post")
    def test_postprocess_value_error_falls_back_to_groq(self, mock_post, app):
        mock_post.side_effect = [chat_response("not a number"), chat_response("42")]
        with app.app_context():
            result, usage = complete("sys", "prompt", postprocess=int)
        assert result == 42
        assert usage == {"provider": "groq"}

    @patch("services.llm_service.requests.post")
    def test_postprocess_error_on_groq_reply_propagates(self, mock_post, app):
        mock_post.side_effect = [chat_response("nope"), chat_response("still nope")]
        with app.app_context():
            with pytest.raises(ValueError):
                complete("sys", "prompt", postprocess=int)
