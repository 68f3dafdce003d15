"""
Configuration helpers and defaults.

Centralize tunables to avoid magic numbers in code/tests.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError, MissingConfiguration

BUILTIN_MODEL_MAP = Path(__file__).parent / "model-map.json"
DEFAULT_AI_ENDPOINT = "https://models.github.ai/inference"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


def _optional_int(name: str) -> int | None:
    raw = (_env(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise MissingConfiguration(f"{name} must be an integer, got {raw!r}") from None


def _int(name: str, default: int) -> int:
    value = _optional_int(name)
    return default if value is None else value


@dataclass(frozen=True)
class Settings:
    github_token: str
    ai_token: str
    comment_body: str
    issue_number: int
    repo_owner: str
    repo_name: str
    comment_author: str
    processing_comment_id: int | None
    model_map_path: str
    system_prompt_path: str | None
    system_prompt: str | None
    workspace: str
    github_api_url: str
    ai_endpoint: str
    llm_provider: str
    llm_timeout_seconds: int
    llm_max_tokens: int


def load_settings() -> Settings:
    """Load settings from the workflow environment; fail fast on missing context."""

    github_token = _env("GITHUB_TOKEN")
    ai_token = _env("GH_AI_TOKEN") or github_token
    if not ai_token:
        raise MissingConfiguration("Neither GH_AI_TOKEN nor GITHUB_TOKEN found for AI authentication.")

    required = {
        "GITHUB_TOKEN": github_token,
        "COMMENT_BODY": _env("COMMENT_BODY"),
        "ISSUE_NUMBER": _env("ISSUE_NUMBER"),
        "REPO_OWNER": _env("REPO_OWNER"),
        "REPO_NAME": _env("REPO_NAME"),
    }
    missing = [k for k, v in required.items() if not (v or "").strip()]
    if missing:
        raise MissingConfiguration("Missing required GitHub context from the workflow: " + ", ".join(missing))

    issue_number = _optional_int("ISSUE_NUMBER")
    if not issue_number or issue_number <= 0:
        raise MissingConfiguration("ISSUE_NUMBER must be a positive integer")

    return Settings(
        github_token=github_token or "",
        ai_token=ai_token,
        comment_body=required["COMMENT_BODY"] or "",
        issue_number=issue_number,
        repo_owner=(required["REPO_OWNER"] or "").strip(),
        repo_name=(required["REPO_NAME"] or "").strip(),
        comment_author=_env("COMMENT_AUTHOR") or "User",
        processing_comment_id=_optional_int("PROCESSING_COMMENT_ID"),
        model_map_path=_env("MODEL_MAP_PATH") or str(BUILTIN_MODEL_MAP),
        system_prompt_path=_env("AI_SYSTEM_PROMPT_PATH") or None,
        system_prompt=_env("AI_SYSTEM_PROMPT") or None,
        workspace=_env("GITHUB_WORKSPACE", ".") or ".",
        github_api_url=_env("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL,
        ai_endpoint=_env("AI_ENDPOINT") or DEFAULT_AI_ENDPOINT,
        llm_provider=(_env("LLM_PROVIDER", "github") or "github").lower(),
        llm_timeout_seconds=_int("LLM_TIMEOUT_SECONDS", 120),
        llm_max_tokens=_int("LLM_MAX_TOKENS", 2048),
    )


def load_model_map(path: str) -> dict[str, str]:
    """Read the alias -> model identifier table. Keys are matched case-insensitively later."""
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"model map not found: {path}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"model map is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("model map must be a JSON object")
    return {str(k): str(v) for k, v in data.items() if isinstance(v, str) and v}
