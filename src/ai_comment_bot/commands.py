"""
Command parsing, model alias resolution, and rendering utilities.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import EmptyPrompt, UnknownModel

TRIGGER = "/ai"
DEFAULT_ALIAS = "default"
RESPONSE_MARKER = "<!-- AI_RESPONSE -->"

TRIGGER_RE = re.compile(r"^" + re.escape(TRIGGER) + r"(?:\s+|$)")


@dataclass(frozen=True)
class ParsedCommand:
    model_alias: str
    model_identifier: str
    prompt: str


def is_trigger(text: str | None) -> bool:
    return bool(text) and TRIGGER_RE.match(text.strip()) is not None


def strip_trigger(text: str) -> str:
    return TRIGGER_RE.sub("", text.strip(), count=1).strip()


def available_aliases(model_map: dict[str, str]) -> list[str]:
    return [k for k in model_map if k.lower() != DEFAULT_ALIAS]


def _lookup(model_map: dict[str, str], alias: str) -> str | None:
    """Case-insensitive alias lookup."""
    wanted = alias.lower()
    return next((v for k, v in model_map.items() if k.lower() == wanted), None)


def split_command(text: str, model_map: dict[str, str]) -> tuple[str, str]:
    """Return (alias, prompt). The first word is an alias only if the table knows it."""
    content = strip_trigger(text)
    parts = content.split(None, 1)
    if parts:
        known = {k.lower(): k for k in model_map}
        alias = known.get(parts[0].lower())
        if alias is not None:
            return alias, parts[1].strip() if len(parts) > 1 else ""
    return DEFAULT_ALIAS, content


def resolve_model(alias: str, model_map: dict[str, str]) -> str:
    identifier = _lookup(model_map, alias)
    if not identifier:
        raise UnknownModel(f"no model configured for alias {alias!r}", available_aliases(model_map))
    return identifier


def parse_command(text: str, model_map: dict[str, str]) -> ParsedCommand:
    alias, prompt = split_command(text, model_map)
    if not prompt:
        raise EmptyPrompt("empty prompt", available_aliases(model_map))
    return ParsedCommand(model_alias=alias, model_identifier=resolve_model(alias, model_map), prompt=prompt)


# ----- Rendering -----
def _alias_list(aliases: list[str]) -> str:
    if not aliases:
        return "_none configured_"
    return ", ".join(f"`{a}`" for a in aliases)


def render_usage_help(aliases: list[str]) -> str:
    return (
        f"It looks like you used the `{TRIGGER}` command without a question. Please provide a prompt.\n\n"
        "**Usage:**\n"
        f"* `{TRIGGER} <your prompt>` (uses default model)\n"
        f"* `{TRIGGER} <model> <your prompt>`\n\n"
        f"**Available models:** {_alias_list(aliases)}"
    )


def render_unknown_model(aliases: list[str]) -> str:
    return (
        "I could not find a model to use. "
        f'Please specify one or ensure a "{DEFAULT_ALIAS}" is configured.\n\n'
        f"Available models: {_alias_list(aliases)}"
    )


def render_error(message: str) -> str:
    # code span fence must be longer than any backtick run in the message
    fence = "`" * (max((len(run) for run in re.findall(r"`+", message)), default=0) + 1)
    pad = " " if message.startswith("`") or message.endswith("`") else ""
    quoted = "\n".join(f"> {line}" for line in f"{fence}{pad}{message}{pad}{fence}".splitlines())
    return (
        "> [!CAUTION]\n"
        "> Sorry, I encountered an error and could not process your request:\n"
        f"{quoted}"
    )
