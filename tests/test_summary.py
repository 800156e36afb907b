"""Tests for recap summary generation."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import httpx
import pytest

from summary import OllamaSummarizer, TemplateSummarizer, get_summarizer, render_template
from settings import get_settings

PAYLOAD = {
    "month": 3,
    "year": 2024,
    "total_activities": 3,
    "activities_by_category": {"social": 1, "academics": 2},
    "top_category": "academics",
    "total_income": Decimal("100"),
    "total_expense": Decimal("40.5"),
    "net": Decimal("59.5"),
}


def test_render_template():
    text = render_template(PAYLOAD)
    assert text.splitlines()[0] == "Monthly Summary for 2024-03:"
    assert "Total activities: 3. Top category: academics." in text
    assert "academics: 2, social: 1" in text
    assert "Income: 100.00, Expense: 40.50, Net: 59.50." in text


def test_render_template_empty_month():
    payload = {
        **PAYLOAD,
        "total_activities": 0,
        "activities_by_category": {},
        "top_category": "-",
        "total_income": Decimal("0"),
        "total_expense": Decimal("0"),
        "net": Decimal("0"),
    }
    assert "Activities by category: none." in render_template(payload)


@pytest.mark.asyncio
async def test_template_summarizer():
    assert await TemplateSummarizer().summarize(PAYLOAD) == render_template(PAYLOAD)


class TestOllamaSummarizer:
    def test_prompt_contains_figures(self):
        prompt = OllamaSummarizer("http://llm:11434/", "test-model").build_prompt(PAYLOAD)
        assert "2024-03" in prompt
        assert '"total_income": "100"' in prompt

    @pytest.mark.asyncio
    async def test_summarize_strips_code_fences(self):
        service = OllamaSummarizer("http://llm:11434", "test-model")

        mock_response = MagicMock()
        mock_response.json.return_value = {"message": {"content": "```\nA steady month.\n```"}}

        with patch.object(httpx.AsyncClient, "post", return_value=mock_response) as mock_post:
            text = await service.summarize(PAYLOAD)

        assert text == "A steady month."
        mock_post.assert_called_once()
        assert mock_post.call_args.args[0] == "http://llm:11434/api/chat"
        assert mock_post.call_args.kwargs["json"]["model"] == "test-model"

    @pytest.mark.asyncio
    async def test_summarize_falls_back_on_http_error(self):
        service = OllamaSummarizer("http://llm:11434", "test-model")

        with patch.object(
            httpx.AsyncClient,
            "post",
            side_effect=httpx.HTTPError("Connection failed"),
        ):
            text = await service.summarize(PAYLOAD)

        assert text == render_template(PAYLOAD)


def test_get_summarizer_follows_settings(monkeypatch):
    monkeypatch.setenv("SUMMARY_BACKEND", "ollama")
    get_settings.cache_clear()
    try:
        assert isinstance(get_summarizer(), OllamaSummarizer)
    finally:
        monkeypatch.setenv("SUMMARY_BACKEND", "template")
        get_settings.cache_clear()
    assert isinstance(get_summarizer(), TemplateSummarizer)
