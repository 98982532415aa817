"""Loading of search test cases from JSON input files."""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from config import logger, INPUT_SUFFIX, MAX_ALLOWED_TEXT_SIZE
from pdfreader import extract_pdf_text

STRING_FIELDS = ("test_id", "text", "pattern", "description")


class CaseError(ValueError):
    """Raised when an input file does not describe a usable test case."""


@dataclass
class SearchCase:
    """One (text, pattern) pair to run through the matcher."""
    test_id: str
    text: str
    pattern: str
    description: str = ""
    source: str = ""


def _read_text_file(record_path: Path, text_file: str) -> str:
    """Resolve `text_file` relative to the record and return its content."""
    path = Path(text_file)
    if not path.is_absolute():
        path = record_path.parent / path
    if not path.exists():
        raise CaseError(f"Text file not found: {path}")
    if os.path.getsize(path) > MAX_ALLOWED_TEXT_SIZE:
        raise CaseError(f"Text file too large: {path}")

    if path.suffix.lower() == ".pdf":
        text = extract_pdf_text(str(path))
        if text is None:
            raise CaseError(f"Could not extract text from PDF: {path}")
        return text

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CaseError(f"Could not read text file {path}: {e}") from e


def parse_case(record: Dict[str, Any], record_path: Union[str, Path] = "") -> SearchCase:
    """
    Build a SearchCase from a decoded JSON object.

    Missing string fields default to "". A `text_file` entry, when present,
    replaces `text` with the content of that file (.txt or .pdf).
    """
    if not isinstance(record, dict):
        raise CaseError(f"Expected a JSON object, got {type(record).__name__}")

    values = {}
    for field in STRING_FIELDS:
        value = record.get(field, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise CaseError(f"Field '{field}' must be a string, got {type(value).__name__}")
        values[field] = value

    text_file = record.get("text_file")
    if text_file:
        if not isinstance(text_file, str):
            raise CaseError("Field 'text_file' must be a string")
        values["text"] = _read_text_file(Path(record_path), text_file)

    text_size = len(values["text"].encode("utf-8"))
    if text_size > MAX_ALLOWED_TEXT_SIZE:
        raise CaseError(f"Text of {text_size} bytes exceeds the allowed size")

    return SearchCase(source=str(record_path), **values)


def load_case(path: Union[str, Path]) -> SearchCase:
    """Read and parse one input file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            record = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CaseError(f"Invalid JSON in {path.name}: {e}") from e
    except OSError as e:
        raise CaseError(f"Could not read {path}: {e}") from e

    case = parse_case(record, path)
    logger.debug(f"Loaded test case '{case.test_id}' from {path.name}")
    return case


def discover_cases(input_dir: Union[str, Path]) -> List[Path]:
    """Return the input files in a directory, sorted by name."""
    input_dir = Path(input_dir)
    files = [p for p in input_dir.iterdir() if p.is_file() and p.name.endswith(INPUT_SUFFIX)]
    return sorted(files, key=lambda p: p.name)
