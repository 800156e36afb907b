"""Summary text generation for monthly recaps."""

import json
import logging
from typing import Any, Dict

import httpx

from settings import get_settings

logger = logging.getLogger(__name__)


class TemplateSummarizer:
    """Deterministic summary built from the recap figures."""

    async def summarize(self, payload: Dict[str, Any]) -> str:
        return render_template(payload)


def render_template(payload: Dict[str, Any]) -> str:
    by_cat = payload["activities_by_category"]
    breakdown = ", ".join(f"{k}: {v}" for k, v in sorted(by_cat.items())) or "none"
    return (
        f"Monthly Summary for {payload['year']}-{payload['month']:02d}:\n"
        f"Total activities: {payload['total_activities']}. Top category: {payload['top_category']}.\n"
        f"Activities by category: {breakdown}.\n"
        f"Finance: Income: {payload['total_income']:.2f}, "
        f"Expense: {payload['total_expense']:.2f}, Net: {payload['net']:.2f}."
    )


class OllamaSummarizer:
    """Summaries written by an Ollama-hosted model.

    Falls back to the template text when the model cannot be reached.
    """

    def __init__(self, base_url: str, model: str, timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    def build_prompt(self, payload: Dict[str, Any]) -> str:
        figures = json.dumps(payload, indent=2, default=str)
        return f"""You are writing the recap section of a monthly activity report for {payload['year']}-{payload['month']:02d}.

Here are the month's figures:

{figures}

Write one short paragraph (3-5 sentences) describing the period: how busy it was, which kinds of work dominated, and how income compared with expenses.
Use only the numbers given. Output plain text only, with no markdown or code fences."""

    async def generate(self, prompt: str, temperature: float = 0.5, max_tokens: int = 400) -> str:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/api/chat",
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "stream": False,
                    "options": {
                        "temperature": temperature,
                        "num_predict": max_tokens,
                    },
                },
            )
            response.raise_for_status()
            data = response.json()
            return data["message"]["content"]

    async def summarize(self, payload: Dict[str, Any]) -> str:
        try:
            text = await self.generate(self.build_prompt(payload))
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning(f"LLM summary failed, using template: {e}")
            return render_template(payload)

        text = text.strip()
        if text.startswith("```"):
            lines = text.split("\n")
            text = "\n".join(line for line in lines if not line.strip().startswith("```")).strip()
        return text or render_template(payload)


def get_summarizer():
    """Summarizer selected by SUMMARY_BACKEND."""
    settings = get_settings()
    if settings.summary_backend == "ollama":
        return OllamaSummarizer(settings.ollama_base_url, settings.llm_model, settings.llm_timeout)
    return TemplateSummarizer()
