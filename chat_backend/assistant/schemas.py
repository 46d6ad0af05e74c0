from __future__ import annotations

from pydantic import BaseModel, Field


class SummarizeIn(BaseModel):
    messages: list[str] = Field(
        description="Conversation messages in chronological order.",
        examples=[["Alice: are we still on for lunch?", "Bob: yes, 12:30 works"]],
    )


class TranslateIn(BaseModel):
    message: str = Field(min_length=1, description="Message text to translate.", examples=["Hello"])
    target_lang: str = Field(
        min_length=1,
        alias="targetLang",
        description="Target language, as a name or code understood by the model.",
        examples=["French"],
    )


class SuggestReplyIn(BaseModel):
    message: str = Field(
        min_length=1,
        description="Message to suggest replies for.",
        examples=["Can you send me the report by Friday?"],
    )


class SummarizeOut(BaseModel):
    summary: str = Field(description="Model-written summary of the conversation.")


class TranslateOut(BaseModel):
    translated: str = Field(description="Model-written translation.", examples=["Bonjour"])


class SuggestReplyOut(BaseModel):
    suggestion: str = Field(
        description="Three candidate replies as a numbered list (unstructured text).",
    )


class MessageOut(BaseModel):
    """Error body for 400 and 500 responses of the assistant routes."""

    message: str
