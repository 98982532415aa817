# Result records for processed search cases and their JSON output files

import json
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from cryptography.hazmat.primitives import hashes

from cases import SearchCase
from config import NOT_FOUND_INDEX, OUTPUT_SUFFIX, INPUT_SUFFIX


def _hash_data(data: str) -> str:
    """Function to hash data with SHA-256"""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data.encode('utf-8'))
    return digest.finalize().hex()


def input_digest(text: str, pattern: str) -> str:
    """Fingerprint of a case's inputs, so an output can be traced to its input."""
    return _hash_data(f"{text}|{pattern}")


@dataclass
class SearchReport:
    """Everything recorded about one processed case."""
    test_id: str
    text: str
    pattern: str
    found: bool
    index: int
    execution_time_ns: int
    execution_time_ms: float
    text_length: int
    pattern_length: int
    lps_array: List[int]
    description: str
    input_digest: str
    matches: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"


def build_report(
    case: SearchCase,
    index: Optional[int],
    matches: List[int],
    lps: List[int],
    elapsed_ns: int,
) -> SearchReport:
    """
    Assemble the report for a case. A missing index is written as
    NOT_FOUND_INDEX so it can never be confused with a match at offset 0.
    """
    return SearchReport(
        test_id=case.test_id,
        text=case.text,
        pattern=case.pattern,
        found=index is not None,
        index=NOT_FOUND_INDEX if index is None else index,
        execution_time_ns=elapsed_ns,
        execution_time_ms=elapsed_ns / 1_000_000,
        text_length=len(case.text),
        pattern_length=len(case.pattern),
        lps_array=list(lps),
        description=case.description,
        input_digest=input_digest(case.text, case.pattern),
        matches=list(matches),
    )


def output_path_for(input_path: Union[str, Path], output_dir: Union[str, Path]) -> Path:
    """data/input/case1.json -> <output_dir>/case1_output.json"""
    name = Path(input_path).name
    if name.endswith(INPUT_SUFFIX):
        name = name[:-len(INPUT_SUFFIX)]
    return Path(output_dir) / f"{name}{OUTPUT_SUFFIX}"


def write_report(report: SearchReport, path: Union[str, Path]) -> Path:
    """Write the report as JSON, creating the output directory if needed."""
    path = Path(path)
    os.makedirs(path.parent, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(report.to_json())
    return path


def format_lps(lps: List[int]) -> str:
    return "[" + ", ".join(str(v) for v in lps) + "]"
