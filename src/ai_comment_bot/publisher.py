"""
Write results back to the issue thread.
"""

from __future__ import annotations

import logging
from typing import Any

from .commands import RESPONSE_MARKER

logger = logging.getLogger(__name__)


def format_response(author: str, text: str) -> str:
    return f"@{author}\n\n{text}\n\n{RESPONSE_MARKER}"


def publish(
    client: Any, issue_number: int, body: str, processing_comment_id: int | None = None
) -> dict[str, Any]:
    """Replace the placeholder comment if there is one, else post a new comment.

    A failed update falls back to creating a comment so the answer is not lost.
    """
    if processing_comment_id:
        try:
            out = client.update_comment(processing_comment_id, body)
            logger.info("Updated processing comment %s", processing_comment_id)
            return out
        except Exception as e:
            logger.warning(
                "Updating processing comment %s failed, creating a new comment: %s",
                processing_comment_id,
                e,
            )
    out = client.create_comment(issue_number, body)
    logger.info("Posted a comment to issue #%s", issue_number)
    return out
