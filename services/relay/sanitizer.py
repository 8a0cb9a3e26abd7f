"""Turns the assistant's last message into plain display text."""

import re
from typing import Any, List

NO_RESPONSE = "(no response)"
TEXT_BLOCK_TYPES = ("text", "output_text")

# e.g. [4:0†source]
CITATION_MARKER = re.compile(r"\[\d+:\d+†[^\]]+\]")
WHITESPACE_RUN = re.compile(r"\s+")


def extract_reply_text(messages: List[Any]) -> str:
    if not messages:
        return NO_RESPONSE
    latest = messages[0] or {}
    block = next(
        (b for b in latest.get("content") or [] if b.get("type") in TEXT_BLOCK_TYPES),
        None,
    )
    if block is None:
        return NO_RESPONSE
    text = block.get("text")
    if isinstance(text, dict):
        text = text.get("value")
    if not isinstance(text, str) or not text:
        return NO_RESPONSE
    return text


def strip_citations(text: str) -> str:
    return CITATION_MARKER.sub("", text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RUN.sub(" ", text).strip()


def sanitize_reply(text: str) -> str:
    # markers first: removing one can leave a double space behind
    return collapse_whitespace(strip_citations(text))
