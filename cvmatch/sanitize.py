"""Pull JSON payloads out of noisy model output.

Models wrap JSON in markdown fences and surround it with prose. These
helpers only cut the candidate substring; ``json.loads`` is the caller's job.
"""
from __future__ import annotations

import re

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def _slice_between(text: str, open_char: str, close_char: str) -> str:
    cleaned = strip_fences(text)
    start = cleaned.find(open_char)
    end = cleaned.rfind(close_char)
    if start != -1 and end != -1 and end > start:
        return cleaned[start : end + 1]
    return cleaned


def clean_json_response(text: str) -> str:
    """Return the first ``{`` .. last ``}`` span after fence removal."""
    return _slice_between(text, "{", "}")


def extract_json_array(text: str) -> str:
    """Return the first ``[`` .. last ``]`` span after fence removal."""
    return _slice_between(text, "[", "]")
