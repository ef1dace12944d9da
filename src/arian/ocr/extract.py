"""Isolate the JSON document from a model's free-text reply."""

from __future__ import annotations

import re

_FENCE_OPEN_RE = re.compile(r"```(?:json)?\s*")
_FENCE = "```"


def extract_json_text(raw: str) -> str:
    """Strip markdown code fences and surrounding whitespace from ``raw``.

    Models asked for bare JSON still wrap it in a fenced block now and then.
    Only fence markers are removed; commentary outside the block is left for the
    decoder to reject.
    """

    text = _FENCE_OPEN_RE.sub("", raw)
    text = text.replace(_FENCE, "")
    return text.strip()


__all__ = ["extract_json_text"]
