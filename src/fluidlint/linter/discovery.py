"""Discovery of CSS and HTML files under the paths given to ``lint``."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from fluidlint.exceptions import ConfigError
from fluidlint.parsers.fragment import fragment_kind_for

logger = logging.getLogger(__name__)


def discover_fragments(paths: Iterable[Path], include_globs: tuple[str, ...], max_file_kb: int) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated list of fragment files.

    Directories are searched with ``include_globs``; explicit files must have
    a CSS or HTML suffix. Files larger than ``max_file_kb`` are skipped with a
    warning.
    """
    size_limit_bytes = max_file_kb * 1024
    discovered: dict[Path, Path] = {}

    for raw_path in paths:
        if not raw_path.exists():
            raise ConfigError(f"path does not exist: {raw_path}")
        if raw_path.is_file():
            if fragment_kind_for(raw_path) is None:
                raise ConfigError(f"unsupported file type (expected .css, .html or .htm): {raw_path}")
            candidates: Iterable[Path] = (raw_path,)
        else:
            candidates = (
                path
                for pattern in include_globs
                for path in raw_path.glob(pattern)
                if path.is_file() and fragment_kind_for(path) is not None
            )

        for path in candidates:
            key = path.resolve()
            if key in discovered:
                continue
            try:
                size = path.stat().st_size
            except OSError as exc:
                logger.warning("Skipping %s: %s", path, exc)
                continue
            if size > size_limit_bytes:
                logger.warning("Skipping %s: %d bytes exceeds max_file_kb=%d", path, size, max_file_kb)
                continue
            discovered[key] = path

    return sorted(discovered.values(), key=lambda path: path.as_posix())
