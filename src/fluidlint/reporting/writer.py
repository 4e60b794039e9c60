"""JSON rendering and file output for evaluation results."""

from __future__ import annotations

import json
from pathlib import Path

from fluidlint.constants.reporting import REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX
from fluidlint.io import write_json_atomic
from fluidlint.model import EvaluationResult


def render_json(result: EvaluationResult) -> str:
    """Serialize a result as byte-stable JSON with a trailing newline."""
    return json.dumps(result.to_dict(), indent=2, sort_keys=True) + "\n"


def write_result(path: Path, result: EvaluationResult) -> None:
    """Atomically write the JSON result to ``path``."""
    write_json_atomic(
        path=path,
        payload=result.to_dict(),
        temp_prefix=REPORT_TEMP_PREFIX,
        temp_suffix=REPORT_TEMP_SUFFIX,
    )
