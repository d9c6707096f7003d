"""Extract -> decode -> validate for a raw AI response."""

from protoforge.core.decoder import parse_json_or_raise
from protoforge.core.extractor import extract_json_candidate
from protoforge.core.validator import ValidationResult, validate_prototype


def parse_and_validate_response(text: str) -> ValidationResult:
    """
    Turn a free-form AI response into a validated prototype.

    Args:
        text: Raw response text

    Returns:
        ValidationResult with the validated spec and soft warnings

    Raises:
        ParseError: If no valid JSON can be decoded
        ValidationError: If the JSON does not match the prototype schema
    """
    candidate = extract_json_candidate(text)
    raw = parse_json_or_raise(candidate, source_text=text)
    return validate_prototype(raw, raw_response=text)
