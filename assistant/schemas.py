from typing import Any, Dict, List, Literal

from ninja import Field, Schema


class SummaryIn(Schema):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class SummaryOut(Schema):
    summary: str
    source: Literal["ai", "fallback"]


class GrammarIn(Schema):
    text: str = Field(..., min_length=1)
    language: str = "en-US"


class GrammarOut(Schema):
    matches: List[Dict[str, Any]]
    language: Dict[str, Any]


class TextIn(Schema):
    text: str = Field(..., min_length=1)


class TextOut(Schema):
    text: str


class CompletionIn(Schema):
    text: str = Field(..., min_length=1)
    type: Literal["continue", "improve", "rephrase", "summarize"] = "continue"


class CompletionOut(Schema):
    completion: str
    suggestions: List[str]


class TitlesIn(Schema):
    content: str = Field(..., min_length=1)


class TitlesOut(Schema):
    titles: List[str]


class OutlineIn(Schema):
    topic: str = Field(..., min_length=1)


class OutlineOut(Schema):
    sections: List[str]


class RewriteIn(Schema):
    text: str = Field(..., min_length=1)
    selected: str = Field(..., min_length=1)


class RewriteOut(Schema):
    suggestions: List[str]


class StatusOut(Schema):
    connected: bool
