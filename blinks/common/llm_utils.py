"""Shared utilities for parsing and tidying LLM responses."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional


def strip_code_fences(raw: str) -> str:
    """Remove markdown code fence lines (```json, ```) from a response."""
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        text = "\n".join(lines)
    return text.strip()


def parse_llm_json(raw: str) -> dict:
    """Parse JSON from an LLM response, handling code fences and preamble text.

    Tries in order:
    1. Strip markdown code fences, then json.loads
    2. Extract substring between first '{' and last '}', then json.loads
    3. Return empty dict
    """
    if not raw:
        return {}

    text = strip_code_fences(raw)

    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    start = raw.find("{")
    end = raw.rfind("}") + 1
    if start >= 0 and end > start:
        try:
            data = json.loads(raw[start:end])
            if isinstance(data, dict):
                return data
        except json.JSONDecodeError:
            pass

    return {}


@dataclass
class ParseResult:
    """Outcome of safe_json_parse"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


def safe_json_parse(raw: str, expected_fields: Iterable[str], fallback: Any = None) -> ParseResult:
    """Parse a JSON object and check that every expected key is present.

    On a parse failure the fallback is returned as ``data``; missing fields are
    reported in ``error``.
    """
    data = parse_llm_json(raw or "")
    if not data:
        return ParseResult(success=False, data=fallback, error="No JSON object in response")

    missing = [name for name in expected_fields if name not in data]
    if missing:
        return ParseResult(success=False, data=fallback, error=f"Missing fields: {', '.join(missing)}")

    return ParseResult(success=True, data=data)


_WRAPPING_QUOTES = "\"'“”‘’"


def clean_text(text: str) -> str:
    """Collapse whitespace, strip wrapping quotation marks, capitalize the first letter."""
    if not text:
        return ""
    value = re.sub(r"\s+", " ", text).strip()
    value = value.lstrip(_WRAPPING_QUOTES).rstrip(_WRAPPING_QUOTES).strip()
    if value and value[0].islower():
        value = value[0].upper() + value[1:]
    return value
