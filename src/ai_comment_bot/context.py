"""
Rebuild issue context for prompts.

- Every comment on the issue is classified into a conversational role so that
  earlier `/ai` exchanges read as a conversation on the next invocation.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .commands import RESPONSE_MARKER, is_trigger, strip_trigger

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "This issue has no description."

_MENTION_RE = re.compile(r"^@[\w-]+(?:\[bot\])?\s*")


class Role(str, Enum):
    PLAIN_COMMENT = "user"
    USER_PROMPT = "user_prompt"
    ASSISTANT_RESPONSE = "assistant"


@dataclass(frozen=True)
class ConversationEntry:
    role: Role
    author: str
    timestamp: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {
            "role": self.role.value,
            "author": self.author,
            "timestamp": self.timestamp,
            "content": self.content,
        }


@dataclass(frozen=True)
class IssueContext:
    title: str
    body: str
    conversation_history: tuple[ConversationEntry, ...] = ()

    @property
    def history_json(self) -> str:
        return serialize_history(self.conversation_history)


def classify_comment(body: str | None, author: str = "", timestamp: str = "") -> ConversationEntry:
    text = body or ""
    if is_trigger(text):
        return ConversationEntry(Role.USER_PROMPT, author, timestamp, strip_trigger(text))
    if RESPONSE_MARKER in text:
        content = _MENTION_RE.sub("", text.strip(), count=1).replace(RESPONSE_MARKER, "")
        return ConversationEntry(Role.ASSISTANT_RESPONSE, author, timestamp, content.strip())
    return ConversationEntry(Role.PLAIN_COMMENT, author, timestamp, text)


def build_conversation(comments: Iterable[dict[str, Any]]) -> tuple[ConversationEntry, ...]:
    """Classify raw GitHub comment payloads, keeping the order they were given in."""
    return tuple(
        classify_comment(
            c.get("body"),
            author=(c.get("user") or {}).get("login") or "",
            timestamp=c.get("created_at") or "",
        )
        for c in comments
    )


def serialize_history(entries: Iterable[ConversationEntry]) -> str:
    return json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)


def fetch_issue_context(client: Any, issue_number: int) -> IssueContext:
    issue = client.get_issue(issue_number)
    comments = client.list_comments(issue_number)
    ctx = IssueContext(
        title=issue.get("title") or "",
        body=issue.get("body") or NO_DESCRIPTION,
        conversation_history=build_conversation(comments),
    )
    logger.info(
        "Fetched issue #%s: title=%r comments=%d body_preview=%r",
        issue_number,
        ctx.title,
        len(comments),
        ctx.body[:200],
    )
    return ctx
