"""
Lenient JSON extraction from model output.

Two explicit stages, kept separate so each can be tested on its own:
  1. strict: the whole reply (minus code fences / control chars) is JSON
  2. brace scan: the first '{' through the last '}' is JSON
Anything else is a parse failure for the caller to handle.
"""
import json
import re
import unicodedata
from typing import Any, Dict, Optional, Tuple

_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


def clean_control_chars(s: str) -> str:
    return "".join(ch for ch in s if ch in "\n\t" or unicodedata.category(ch)[0] != "C")


def strip_code_fences(s: str) -> str:
    s = s.strip()
    if s.startswith("```"):
        s = s.split("\n", 1)[1] if "\n" in s else ""
    if s.endswith("```"):
        s = s[:-3]
    return s.strip()


def parse_strict(text: str) -> Optional[Dict[str, Any]]:
    """Stage 1. Returns the object, or None if the reply is not a bare JSON object."""
    cleaned = strip_code_fences(clean_control_chars(text or ""))
    if not cleaned:
        return None
    try:
        obj = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    # sometimes models double-encode JSON as a string
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except json.JSONDecodeError:
            return None
    return obj if isinstance(obj, dict) else None


def parse_brace_span(text: str) -> Optional[Dict[str, Any]]:
    """Stage 2. Greedy first-'{'-to-last-'}' match; tolerates prose around the object."""
    m = _BRACE_SPAN.search(clean_control_chars(text or ""))
    if not m:
        return None
    span = m.group(0)
    try:
        obj = json.loads(span)
    except json.JSONDecodeError:
        # remove trailing commas before '}' or ']'
        try:
            obj = json.loads(re.sub(r",(\s*[}\]])", r"\1", span))
        except json.JSONDecodeError:
            return None
    return obj if isinstance(obj, dict) else None


def extract_json_object(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Run both stages in order. Returns (obj, stage) where stage is
    "strict", "brace_scan", or "failed".
    """
    obj = parse_strict(text)
    if obj is not None:
        return obj, "strict"
    obj = parse_brace_span(text)
    if obj is not None:
        return obj, "brace_scan"
    return None, "failed"
