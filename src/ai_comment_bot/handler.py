"""
GitHub Actions entry point: `/ai` issue comment -> AI reply comment.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any

from . import commands
from .config import Settings, load_model_map, load_settings
from .context import fetch_issue_context
from .errors import GitHubError, MissingConfiguration, UnknownModel, UsageError
from .github import GitHubClient
from .llm import generate
from .prompts import build_system_message, load_system_prompt
from .publisher import format_response, publish

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")
    root.setLevel(level)


def _log(msg: str, **fields: Any) -> None:
    try:
        rec = {"msg": msg, **fields}
        logger.info(json.dumps(rec, ensure_ascii=False))
    except (TypeError, ValueError):
        # Fallback to plain log
        logger.info("%s | %s", msg, fields)


def _run(settings: Settings, client: GitHubClient) -> int:
    model_map = load_model_map(settings.model_map_path)

    try:
        cmd = commands.parse_command(settings.comment_body, model_map)
    except UsageError as e:
        if isinstance(e, UnknownModel):
            text = commands.render_unknown_model(e.aliases)
        else:
            text = commands.render_usage_help(e.aliases)
        publish(client, settings.issue_number, text, settings.processing_comment_id)
        _log("usage_help_posted", issue=settings.issue_number, reason=type(e).__name__)
        return 0

    _log(
        "prompt_received",
        issue=settings.issue_number,
        alias=cmd.model_alias,
        model=cmd.model_identifier,
        prompt_chars=len(cmd.prompt),
    )

    system_prompt = load_system_prompt(settings)
    issue_ctx = fetch_issue_context(client, settings.issue_number)
    system_message = build_system_message(system_prompt, issue_ctx)

    t0 = time.time()
    reply = generate(settings, cmd.model_identifier, system_message, cmd.prompt)
    _log(
        "llm_ok",
        model=cmd.model_identifier,
        provider=settings.llm_provider,
        ms=int((time.time() - t0) * 1000),
        out_chars=len(reply),
    )

    publish(
        client,
        settings.issue_number,
        format_response(settings.comment_author, reply),
        settings.processing_comment_id,
    )
    return 0


def main() -> int:
    _configure_logging()
    start_ts = time.time()

    try:
        settings = load_settings()
    except MissingConfiguration as e:
        logger.error("Configuration error: %s", e)
        return 1

    if not commands.is_trigger(settings.comment_body):
        _log("ignored_no_trigger", issue=settings.issue_number)
        return 0

    client = GitHubClient(
        settings.github_api_url, settings.github_token, settings.repo_owner, settings.repo_name
    )

    try:
        status = _run(settings, client)
    except GitHubError as e:
        if e.status != 404:
            return _report_failure(settings, client, e)
        logger.error("GitHub request failed: %s", e)
        logger.error(
            "A '404 Not Found' from GitHub usually means the repository or issue number is wrong "
            "or the token has no access. Check REPO_OWNER, REPO_NAME and ISSUE_NUMBER."
        )
        return 1
    except Exception as e:
        return _report_failure(settings, client, e)

    _log("ok", issue=settings.issue_number, ms_total=int((time.time() - start_ts) * 1000))
    return status


def _report_failure(settings: Settings, client: GitHubClient, err: Exception) -> int:
    logger.exception("The bot encountered a fatal error: %s", err)
    _log("failed", issue=settings.issue_number, error=str(err), kind=type(err).__name__)
    try:
        publish(
            client,
            settings.issue_number,
            commands.render_error(str(err)),
            settings.processing_comment_id,
        )
    except Exception:
        logger.exception("Failed to post error comment to issue #%s", settings.issue_number)
    return 1
