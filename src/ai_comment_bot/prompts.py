"""
System prompt resolution and system message assembly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .config import Settings
from .context import IssueContext

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant integrated into GitHub issues. The user is commenting on an issue. "
    "Provide your answer in the context of the original issue description provided below."
)
DEFAULT_PROMPT_FILE = Path(".github") / "prompts" / "prompt.md"


def _read(path: Path) -> str | None:
    if path.is_file():
        return path.read_text(encoding="utf-8")
    return None


def _from_custom_path(settings: Settings) -> str | None:
    if not settings.system_prompt_path:
        return None
    return _read(Path(settings.system_prompt_path))


def _from_workspace_file(settings: Settings) -> str | None:
    return _read(Path(settings.workspace) / DEFAULT_PROMPT_FILE)


def _from_env(settings: Settings) -> str | None:
    return settings.system_prompt


PROMPT_SOURCES: list[tuple[str, Callable[[Settings], str | None]]] = [
    ("custom path", _from_custom_path),
    ("workspace file", _from_workspace_file),
    ("AI_SYSTEM_PROMPT", _from_env),
]


def load_system_prompt(settings: Settings) -> str:
    for name, source in PROMPT_SOURCES:
        prompt = source(settings)
        if prompt:
            logger.info("Loaded system prompt from %s", name)
            return prompt
    logger.info("Using default system prompt")
    return DEFAULT_SYSTEM_PROMPT


def build_system_message(system_prompt: str, context: IssueContext) -> str:
    return f"""{system_prompt}

--- Issue Context ---
Title: {context.title}
Body: {context.body}

--- Conversation History ---
The following is a JSON array of the conversation history on this issue:
- "role": "user" = regular user comment
- "role": "user_prompt" = user's AI prompt (started with /ai)
- "role": "assistant" = your previous AI responses

{context.history_json}
--- End Context ---""".strip()
