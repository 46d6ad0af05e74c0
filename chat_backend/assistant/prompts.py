from __future__ import annotations

SUMMARY_INSTRUCTION = "Summarize this conversation:"
SUGGESTED_REPLY_COUNT = 3


def build_summary_prompt(*, messages: list[str]) -> str:
    """Instruction line followed by the conversation, one message per line."""

    conversation = "\n".join(messages)
    return f"{SUMMARY_INSTRUCTION}\n{conversation}"


def build_translation_prompt(*, message: str, target_lang: str) -> str:
    return f"Translate this message to {target_lang}: {message}"


def build_reply_suggestion_prompt(*, message: str) -> str:
    # The reply comes back as free text; the numbered list is not parsed.
    return (
        f"Suggest {SUGGESTED_REPLY_COUNT} helpful and friendly replies to this message.\n"
        "Return them as a numbered list:\n\n"
        f'"{message}"'
    )
