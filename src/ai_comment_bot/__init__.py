"""
AI Issue Comment Bot (GitHub Actions + GitHub Models)

Where: GitHub Actions job triggered by an issue comment.
What:  Parse `/ai [model] prompt`, rebuild the issue conversation, call the model, post reply.
Why:   Ask an AI about an issue without leaving the thread.
"""

__all__ = [
    "config",
    "handler",
    "github",
    "commands",
    "context",
    "errors",
    "llm",
    "prompts",
    "publisher",
]
