"""Tests for utils.llm.call_llm — the Anthropic client is mocked."""

from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from utils.llm import TRUNCATION_NOTE, call_llm, get_client


def _make_client(chunks, stop_reason="end_turn"):
    stream = MagicMock()
    stream.text_stream = chunks
    stream.get_final_message.return_value = MagicMock(stop_reason=stop_reason)
    client = MagicMock()
    client.messages.stream.return_value.__enter__.return_value = stream
    return client


def _connection_error():
    return anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
        get_client()


def test_streamed_text_joined():
    client = _make_client(["<!-- File: index.html -->\n", "<h1>Hi</h1>"])
    with patch("utils.llm.get_client", return_value=client):
        text = call_llm("system", "make the header blue")
    assert text == "<!-- File: index.html -->\n<h1>Hi</h1>"
    kwargs = client.messages.stream.call_args.kwargs
    assert kwargs["system"] == "system"
    assert kwargs["messages"] == [{"role": "user", "content": "make the header blue"}]


def test_token_limit_appends_note():
    client = _make_client(["<h1>Cut"], stop_reason="max_tokens")
    with patch("utils.llm.get_client", return_value=client):
        assert call_llm("s", "u") == "<h1>Cut" + TRUNCATION_NOTE


def test_retries_once_then_succeeds():
    client = _make_client(["ok"])
    working = client.messages.stream.return_value
    client.messages.stream.side_effect = [_connection_error(), working]
    with patch("utils.llm.get_client", return_value=client), patch("utils.llm.time.sleep"):
        assert call_llm("s", "u") == "ok"
    assert client.messages.stream.call_count == 2


def test_second_failure_propagates():
    client = MagicMock()
    client.messages.stream.side_effect = [_connection_error(), _connection_error()]
    with patch("utils.llm.get_client", return_value=client), patch("utils.llm.time.sleep"):
        with pytest.raises(anthropic.APIError):
            call_llm("s", "u")
