"""
Writing assistance built on the text generator and the grammar service.

Summaries and grammar checks always produce a result, falling back to local
heuristics when the remote services are down. The writing helpers have no
sensible local fallback and raise ``AIServiceUnavailable`` instead.
"""

import html
import logging
import re
from typing import List

import requests
from django.conf import settings
from django.utils.html import strip_tags

from assistant.client import generator
from blogsite.constants import (
    SUMMARY_CONTENT_CHARS,
    SUMMARY_MAX_TOKENS,
    TITLE_CONTENT_CHARS,
)

logger = logging.getLogger(__name__)


class AIServiceUnavailable(Exception):
    pass


FALLBACK_NOTE = "This summary was generated automatically due to AI service limitations."

KEY_POINT_RE = re.compile(
    r"\b(important|key|main|essential|crucial|significant)\b[^.!?]*[.!?]",
    re.IGNORECASE,
)
SCRIPT_STYLE_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)

COMMON_MISSPELLINGS = {
    "teh": "the",
    "recieve": "receive",
    "occurence": "occurrence",
    "seperate": "separate",
    "definately": "definitely",
    "accomodate": "accommodate",
    "neccessary": "necessary",
    "existance": "existence",
    "beleive": "believe",
    "begining": "beginning",
}

COMPLETION_PROMPTS = {
    "continue": (
        "Continue writing this blog post in a natural, engaging way. "
        "Keep the same tone and style:\n\n{text}\n\n"
        "Continue the text naturally (provide only the continuation, "
        "not the original text):"
    ),
    "improve": (
        "Improve this text to make it more engaging, clear, and well-written "
        "while keeping the same meaning:\n\n{text}\n\nImproved version:"
    ),
    "rephrase": (
        "Rephrase this text in a different way while keeping the same "
        "meaning:\n\n{text}\n\nRephrased version:"
    ),
    "summarize": "Summarize this text concisely:\n\n{text}\n\nSummary:",
}
DEFAULT_COMPLETION_PROMPT = (
    "Continue writing this blog post in a natural, engaging way:\n\n"
    "{text}\n\nContinuation:"
)


def extract_text(content: str) -> str:
    """Plain text of an HTML fragment with whitespace collapsed."""
    text = SCRIPT_STYLE_RE.sub(" ", content or "")
    text = html.unescape(strip_tags(text))
    return re.sub(r"\s+", " ", text).strip()


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


"""
Summaries
"""


def fallback_summary(title: str, content: str) -> str:
    clean = extract_text(content)
    sentences = [s for s in re.split(r"[.!?]+", clean) if len(s.strip()) > 20]

    if sentences:
        summary = f'This blog post titled "{title}" {sentences[0].strip().lower()}'
        key_point = KEY_POINT_RE.search(clean)
        if key_point:
            summary += f" The post highlights {key_point.group(0).lower()}"
        return f"{summary} {FALLBACK_NOTE}"

    words = " ".join(clean.split(" ")[:50])
    return (
        f'This blog post about "{title}" covers topics related to {words}... '
        f"{FALLBACK_NOTE}"
    )


def summarize_blog(title: str, content: str) -> dict:
    limited = extract_text(content)[:SUMMARY_CONTENT_CHARS]
    prompt = f'Summarize in 1-2 sentences: "{title}" - {limited}'

    text = generator.generate_content(
        prompt, max_tokens=SUMMARY_MAX_TOKENS, temperature=0.3
    )
    if text:
        return {"summary": text, "source": "ai"}

    logger.warning(f"AI summary unavailable for '{title}', using fallback")
    return {"summary": fallback_summary(title, content), "source": "fallback"}


"""
Grammar and spelling
"""


def basic_grammar_check(text: str) -> dict:
    matches = []
    for wrong, correct in COMMON_MISSPELLINGS.items():
        for match in re.finditer(rf"\b{wrong}\b", text, re.IGNORECASE):
            matches.append(
                {
                    "message": f'Possible spelling mistake: "{wrong}" -> "{correct}"',
                    "shortMessage": "Spelling",
                    "offset": match.start(),
                    "length": len(wrong),
                    "replacements": [{"value": correct}],
                    "ruleId": "basic-spelling",
                    "category": "TYPOS",
                    "ruleIssueType": "misspelling",
                }
            )
    return {
        "matches": matches,
        "language": {"code": "en-US", "name": "English (Basic Check)"},
    }


def check_grammar(text: str, language: str = "en-US") -> dict:
    try:
        response = requests.post(
            settings.LANGUAGETOOL_URL,
            data={"text": text, "language": language, "enabledOnly": "false"},
            timeout=settings.AI_REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Grammar service unavailable, using basic check: {e}")
        return basic_grammar_check(text)


def auto_correct(text: str) -> str:
    """Apply the first replacement of every spelling match, last match first."""
    result = check_grammar(text)
    corrections = sorted(
        (
            match
            for match in result.get("matches", [])
            if _issue_type(match) in ("misspelling", "typographical")
            and match.get("replacements")
        ),
        key=lambda match: match["offset"],
        reverse=True,
    )

    corrected = text
    for match in corrections:
        start = match["offset"]
        end = start + match["length"]
        corrected = corrected[:start] + match["replacements"][0]["value"] + corrected[end:]
    return corrected


def _issue_type(match: dict) -> str:
    # LanguageTool nests the issue type under "rule"; the basic check does not
    return match.get("ruleIssueType") or match.get("rule", {}).get("issueType", "")


"""
Writing helpers
"""


def complete_text(text: str, kind: str = "continue") -> dict:
    prompt = COMPLETION_PROMPTS.get(kind, DEFAULT_COMPLETION_PROMPT).format(text=text)
    completion = generator.generate_content(prompt)
    if not completion:
        raise AIServiceUnavailable(
            "Failed to generate text completion. Please try again."
        )

    alternative_prompts = [
        f"Provide an alternative way to {kind} this text: {text}",
        f"Give another version of {kind} this text: {text}",
    ]
    suggestions = [generator.generate_content(p) for p in alternative_prompts]
    return {
        "completion": completion,
        "suggestions": [s for s in suggestions if s.strip()],
    }


def suggest_titles(content: str) -> List[str]:
    prompt = (
        "Based on this blog post content, suggest 5 engaging and SEO-friendly "
        f"titles:\n\n{content[:TITLE_CONTENT_CHARS]}...\n\n"
        "Provide only the titles, one per line:"
    )
    response = generator.generate_content(prompt)
    if not response:
        raise AIServiceUnavailable("Failed to generate title suggestions.")
    return _lines(response)[:5]


def suggest_outline(topic: str) -> List[str]:
    prompt = (
        f'Create a blog post outline for the topic: "{topic}"\n\n'
        "Provide 5-7 main sections/headings that would make a comprehensive "
        "blog post:"
    )
    response = generator.generate_content(prompt)
    if not response:
        raise AIServiceUnavailable("Failed to generate an outline.")
    return _lines(response)


def suggest_rewrites(text: str, selected: str) -> List[str]:
    prompt = (
        f'Given this context: "{text}"\n\n'
        "Provide 3 different ways to improve or rephrase this selected text: "
        f'"{selected}"\n\nReturn only the suggestions, one per line:'
    )
    response = generator.generate_content(prompt)
    if not response:
        raise AIServiceUnavailable("Failed to generate writing suggestions.")
    return _lines(response)[:3]


def connection_ok() -> bool:
    return generator.connection_ok()
