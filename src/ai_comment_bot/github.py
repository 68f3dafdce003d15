"""
Minimal GitHub REST API client (issues and comments) using stdlib urllib.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from .errors import GitHubError

PAGE_SIZE = 100


class GitHubClient:
    def __init__(self, api_url: str, token: str, owner: str, repo: str, timeout: int = 15) -> None:
        self.base_api = api_url.rstrip("/")
        self.token = token
        self.repo_path = f"/repos/{urllib.parse.quote(owner)}/{urllib.parse.quote(repo)}"
        self.timeout = timeout

    # ----- Helpers -----
    def _url(self, path: str, params: dict[str, Any] | None = None) -> str:
        url = self.base_api + self.repo_path + path
        if params:
            url += "?" + urllib.parse.urlencode(params)
        return url

    def _request(self, method: str, url: str, payload: dict[str, Any] | None = None) -> Any:
        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={
                "User-Agent": "AICommentBot/1.0",
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.token}",
                "X-GitHub-Api-Version": "2022-11-28",
                "Content-Type": "application/json",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                body = resp.read()
        except urllib.error.HTTPError as e:
            detail = e.read().decode("utf-8", "replace")
            try:
                detail = json.loads(detail).get("message") or detail
            except (ValueError, AttributeError):
                pass
            raise GitHubError(f"{method} {url} failed: {e.code} {detail}", status=e.code) from e
        if not body:
            return {}
        return json.loads(body.decode("utf-8"))

    # ----- Public APIs -----
    def get_issue(self, issue_number: int) -> dict[str, Any]:
        return self._request("GET", self._url(f"/issues/{int(issue_number)}"))

    def list_comments(self, issue_number: int) -> list[dict[str, Any]]:
        """Return every comment on the issue, oldest first."""
        comments: list[dict[str, Any]] = []
        page = 1
        while True:
            url = self._url(f"/issues/{int(issue_number)}/comments", {"per_page": PAGE_SIZE, "page": page})
            data = self._request("GET", url)
            batch = list(data) if isinstance(data, list) else []
            comments.extend(batch)
            if len(batch) < PAGE_SIZE:
                return comments
            page += 1

    def create_comment(self, issue_number: int, body: str) -> dict[str, Any]:
        return self._request("POST", self._url(f"/issues/{int(issue_number)}/comments"), {"body": body})

    def update_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        return self._request("PATCH", self._url(f"/issues/comments/{int(comment_id)}"), {"body": body})
