"""ProtoForge: turn AI prototype responses into project packages."""

from protoforge.core.errors import (
    MaterializationIOError,
    ParseError,
    ProtoForgeError,
    ValidationError,
)
from protoforge.core.extractor import extract_json_candidate
from protoforge.core.response import parse_and_validate_response
from protoforge.output.materializer import generate_project_from_response

__version__ = "0.1.0"

__all__ = [
    "MaterializationIOError",
    "ParseError",
    "ProtoForgeError",
    "ValidationError",
    "extract_json_candidate",
    "generate_project_from_response",
    "parse_and_validate_response",
]
