from ai_comment_bot.context import Role, classify_comment
from ai_comment_bot.publisher import format_response, publish


class FakeGitHub:
    def __init__(self, fail_update=False):
        self.fail_update = fail_update
        self.created = []
        self.updated = []

    def create_comment(self, issue_number, body):
        self.created.append((issue_number, body))
        return {"id": 1}

    def update_comment(self, comment_id, body):
        if self.fail_update:
            raise RuntimeError("403 forbidden")
        self.updated.append((comment_id, body))
        return {"id": comment_id}


def test_format_response():
    assert format_response("alice", "Answer") == "@alice\n\nAnswer\n\n<!-- AI_RESPONSE -->"


def test_formatted_response_reads_back_as_assistant():
    e = classify_comment(format_response("alice", "Multi\nline answer"))
    assert e.role is Role.ASSISTANT_RESPONSE
    assert e.content == "Multi\nline answer"


def test_publish_updates_placeholder():
    gh = FakeGitHub()
    publish(gh, 5, "body", 42)
    assert gh.updated == [(42, "body")]
    assert gh.created == []


def test_publish_falls_back_to_new_comment():
    gh = FakeGitHub(fail_update=True)
    publish(gh, 5, "body", 42)
    assert gh.created == [(5, "body")]


def test_publish_without_placeholder_creates():
    gh = FakeGitHub()
    publish(gh, 5, "body")
    assert gh.created == [(5, "body")]
    assert gh.updated == []
