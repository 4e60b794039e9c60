"""Atomic text and JSON writers."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any


def write_text_atomic(*, path: Path, content: str, temp_prefix: str, temp_suffix: str) -> None:
    """Write ``content`` to ``path`` via a temp file in the same directory and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=temp_prefix,
            suffix=temp_suffix,
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
        os.replace(temp_path, path)
        temp_path = None
    finally:
        if temp_path is not None:
            with suppress(FileNotFoundError):
                temp_path.unlink()


def write_json_atomic(*, path: Path, payload: Any, temp_prefix: str, temp_suffix: str) -> None:
    """Serialize ``payload`` with sorted keys and write it atomically."""
    write_text_atomic(
        path=path,
        content=json.dumps(payload, indent=2, sort_keys=True) + "\n",
        temp_prefix=temp_prefix,
        temp_suffix=temp_suffix,
    )
