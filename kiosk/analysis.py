"""Monthly financial analysis through the Gemini REST API."""

from __future__ import annotations

import logging

import httpx

from kiosk.config import (
    GEMINI_API_KEY,
    GEMINI_ENDPOINT,
    GEMINI_MAX_OUTPUT_TOKENS,
    GEMINI_MODEL,
    GEMINI_TEMPERATURE,
    GEMINI_TIMEOUT_SECONDS,
)
from kiosk.constant import ANALYSIS_PROMPT, NO_ANALYSIS_TEXT

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """The analysis could not be produced; safe to retry."""


def build_prompt(data: str) -> str:
    return ANALYSIS_PROMPT.format(data=data)


def _response_text(payload: dict) -> str:
    parts: list[str] = []
    for candidate in payload.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            text = part.get("text")
            if text:
                parts.append(text)
        if parts:
            break
    return "".join(parts).strip()


def get_monthly_analysis(
    data: str,
    api_key: str | None = None,
    model: str = GEMINI_MODEL,
    client: httpx.Client | None = None,
) -> str:
    """
    Ask the model for a short markdown analysis of one month's figures.

    Args:
        data: Aggregated month figures, see ``reporting.analysis_data``.
        api_key: Overrides the configured key.
        model: Model id used in the endpoint path.
        client: Pre-built client (tests pass one with a mock transport).

    Returns:
        The markdown text, or a placeholder when the model returned none.

    Raises:
        AnalysisError: missing key, transport failure, error status or an
            unreadable response body.
    """
    key = api_key or GEMINI_API_KEY
    if not key:
        raise AnalysisError("API_KEY is not defined. Please set the environment variable.")

    payload = {
        "contents": [{"parts": [{"text": build_prompt(data)}]}],
        "generationConfig": {
            "temperature": GEMINI_TEMPERATURE,
            "maxOutputTokens": GEMINI_MAX_OUTPUT_TOKENS,
        },
    }
    url = GEMINI_ENDPOINT.format(model=model)
    owns_client = client is None
    http = client or httpx.Client(timeout=GEMINI_TIMEOUT_SECONDS)
    try:
        response = http.post(url, json=payload, headers={"x-goog-api-key": key})
        response.raise_for_status()
        text = _response_text(response.json())
    except (httpx.HTTPError, ValueError, AttributeError, TypeError) as exc:
        # AttributeError/TypeError: a 200 whose body is not the candidates layout.
        logger.error("analysis_failed model=%s error=%r", model, exc)
        raise AnalysisError("Falha ao obter análise mensal da IA. Por favor, tente novamente.") from exc
    finally:
        if owns_client:
            http.close()

    logger.info("analysis_ok model=%s chars=%d", model, len(text))
    return text or NO_ANALYSIS_TEXT
