"""Strict JSON decoding with bounded diagnostic context."""

import json
import math
from typing import Any, Optional

from protoforge.core.errors import ParseError

# Characters of the candidate kept from each end in error messages
CONTEXT_CHARS = 800


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant '{name}' is not allowed")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def parse_json_or_raise(candidate: str, source_text: Optional[str] = None) -> Any:
    """
    Parse a JSON candidate, raising a descriptive ParseError on failure.

    Args:
        candidate: JSON candidate produced by the extractor
        source_text: Original response text, kept on the error for debugging

    Returns:
        Decoded JSON value

    Raises:
        ParseError: If the candidate is not valid JSON
    """
    try:
        return json.loads(
            candidate, parse_constant=_reject_constant, parse_float=_parse_finite_float
        )
    except (ValueError, TypeError) as e:
        candidate_text = candidate or ""
        head = candidate_text[:CONTEXT_CHARS]
        tail = candidate_text[-CONTEXT_CHARS:]
        message = (
            "Failed to parse JSON from AI response. "
            "Tip: ensure the model outputs a single JSON object (no trailing commentary).\n\n"
            f"Parse error: {e}\n\n"
            f"--- JSON candidate (start) ---\n{head}\n"
            f"--- JSON candidate (end) ---\n{tail}\n"
        )
        raise ParseError(message, candidate=candidate_text, raw_response=source_text) from e
