"""Best-effort isolation of a JSON object from free-form model output."""

import re

# Only the first fenced block is considered.
FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json_candidate(text: str) -> str:
    """
    Extract the most likely JSON substring from an AI response.

    Strategy, in priority order:
    1. The inner content of the first fenced code block (optionally tagged ``json``).
    2. The inclusive span from the first ``{`` to the last ``}``.
    3. The trimmed input, unchanged.

    Never raises; decoding the result is what reports failures.

    Args:
        text: Raw response text

    Returns:
        JSON candidate string
    """
    if not isinstance(text, str):
        return ""

    fenced = FENCED_BLOCK_PATTERN.search(text)
    if fenced and fenced.group(1):
        return fenced.group(1).strip()

    trimmed = text.strip()
    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start != -1 and end > start:
        return trimmed[start : end + 1].strip()

    return trimmed
