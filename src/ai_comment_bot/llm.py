"""
Chat completion wrapper.

Providers:
  github  - GitHub Models inference endpoint through the OpenAI SDK.
  bedrock - Amazon Bedrock Converse API via boto3.
"""

from __future__ import annotations

import importlib
from typing import Any

from openai import APIError, OpenAI

from .config import Settings
from .errors import ConfigurationError, GenerationError

TEMPERATURE = 0.7
TOP_P = 1.0


def _boto3():
    # Allow tests to monkeypatch module-level `boto3` symbol.
    return globals().get("boto3") or importlib.import_module("boto3")


def _bedrock_client():
    return _boto3().client("bedrock-runtime")


def _chat_completions(
    settings: Settings, model_id: str, system: str, user_text: str
) -> str:
    # generation errors are not retried
    client = OpenAI(
        base_url=settings.ai_endpoint,
        api_key=settings.ai_token,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )
    try:
        response = client.chat.completions.create(
            model=model_id,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_text},
            ],
            temperature=TEMPERATURE,
            top_p=TOP_P,
        )
    except APIError as e:
        body = e.body if isinstance(e.body, dict) else {}
        raise GenerationError(body.get("message") or e.message) from e
    if not response.choices:
        raise GenerationError("model returned no choices")
    return response.choices[0].message.content or ""


def _converse(settings: Settings, model_id: str, system: str, user_text: str) -> str:
    client = _bedrock_client()
    try:
        resp = client.converse(
            modelId=model_id,
            system=[{"text": system}],
            messages=[{"role": "user", "content": [{"text": user_text}]}],
            inferenceConfig={
                "temperature": TEMPERATURE,
                "topP": TOP_P,
                "maxTokens": settings.llm_max_tokens,
            },
        )
    except Exception as e:
        # botocore ClientError carries the service message under response["Error"]
        err: dict[str, Any] = (getattr(e, "response", None) or {}).get("Error") or {}
        raise GenerationError(err.get("Message") or str(e)) from e
    blocks = ((resp.get("output") or {}).get("message") or {}).get("content") or []
    return "".join(b.get("text", "") for b in blocks)


PROVIDERS = {
    "github": _chat_completions,
    "bedrock": _converse,
}


def generate(settings: Settings, model_id: str, system: str, prompt: str) -> str:
    """Send one system + one user message and return the completion text."""
    call = PROVIDERS.get(settings.llm_provider)
    if call is None:
        raise ConfigurationError(f"unknown LLM_PROVIDER {settings.llm_provider!r}")
    return call(settings, model_id, system, prompt)
