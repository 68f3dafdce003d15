import json

import ai_comment_bot.handler as h
from ai_comment_bot.errors import GenerationError, GitHubError


class FakeGitHub:
    def __init__(self, *_a, **_k):
        self.created = []
        self.updated = []
        self.fail_create = False
        self.issue_error = None

    def get_issue(self, issue_number):
        if self.issue_error:
            raise self.issue_error
        return {"title": "T", "body": "B"}

    def list_comments(self, issue_number):
        return []

    def create_comment(self, issue_number, body):
        if self.fail_create:
            raise GitHubError("500 boom", status=500)
        self.created.append(body)
        return {"id": 1}

    def update_comment(self, comment_id, body):
        self.updated.append(body)
        return {"id": comment_id}


def _setup(monkeypatch, tmp_path, generate=None, **env):
    map_path = tmp_path / "model-map.json"
    map_path.write_text(json.dumps({"default": "openai/gpt-4o"}))
    monkeypatch.setenv("GITHUB_TOKEN", "gh")
    monkeypatch.setenv("COMMENT_BODY", "/ai summarize please")
    monkeypatch.setenv("ISSUE_NUMBER", "9")
    monkeypatch.setenv("REPO_OWNER", "octo")
    monkeypatch.setenv("REPO_NAME", "repo")
    monkeypatch.setenv("MODEL_MAP_PATH", str(map_path))
    monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path))
    monkeypatch.setenv("LLM_PROVIDER", "github")
    monkeypatch.delenv("PROCESSING_COMMENT_ID", raising=False)
    for k, v in env.items():
        monkeypatch.setenv(k, v)

    fg = FakeGitHub()

    def failing_generate(*_a, **_k):
        raise GenerationError("rate limited")

    monkeypatch.setitem(h.__dict__, "GitHubClient", lambda *_a, **_k: fg)
    monkeypatch.setitem(h.__dict__, "generate", generate or failing_generate)
    return fg


def test_generation_error_posts_caution_comment(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path)

    assert h.main() == 1

    assert len(fg.created) == 1
    assert fg.created[0].startswith("> [!CAUTION]")
    assert "`rate limited`" in fg.created[0]


def test_generation_error_replaces_placeholder(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path, PROCESSING_COMMENT_ID="31")

    assert h.main() == 1

    assert fg.created == []
    assert "rate limited" in fg.updated[0]


def test_unexpected_error_posts_generic_notice(monkeypatch, tmp_path):
    def boom(*_a, **_k):
        raise KeyError("choices")

    fg = _setup(monkeypatch, tmp_path, generate=boom)

    assert h.main() == 1
    assert "[!CAUTION]" in fg.created[0]


def test_missing_model_map_is_reported(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path, MODEL_MAP_PATH=str(tmp_path / "missing.json"))

    assert h.main() == 1
    assert "model map not found" in fg.created[0]


def test_failed_error_notice_is_only_logged(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path)
    fg.fail_create = True

    assert h.main() == 1
    assert fg.created == []


def test_not_found_skips_error_comment(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path)
    fg.issue_error = GitHubError("GET issue failed: 404 Not Found", status=404)

    assert h.main() == 1
    assert fg.created == [] and fg.updated == []


def test_missing_configuration_exits_without_posting(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path)
    monkeypatch.delenv("ISSUE_NUMBER")

    assert h.main() == 1
    assert fg.created == []


def test_malformed_tunable_exits_without_posting(monkeypatch, tmp_path):
    fg = _setup(monkeypatch, tmp_path, LLM_TIMEOUT_SECONDS="abc")

    assert h.main() == 1
    assert fg.created == [] and fg.updated == []
