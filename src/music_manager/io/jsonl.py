# music_manager/io/jsonl.py

"""JSONL helpers for the library file.

Reads are tolerant (bad lines are logged and skipped). Full rewrites go
through a temporary file in the same directory and replace the original, so
an interrupted write never leaves a half-written library behind.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

logger = logging.getLogger(__name__)


def iter_jsonl_records(path: Path) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield ``(line_number, object)`` pairs for every JSON object line."""
    if not path.exists():
        return

    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning(
                    "Skipping invalid JSON line %d in %s: %s",
                    line_number,
                    path,
                    exc,
                )
                continue
            if not isinstance(obj, dict):
                logger.warning(
                    "Skipping line %d in %s: expected an object, got %s",
                    line_number,
                    path,
                    type(obj).__name__,
                )
                continue
            yield line_number, obj


def _dump_line(obj: dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False) + "\n"


def append_jsonl_line(path: Path, obj: dict[str, Any]) -> None:
    """Append a single JSON object as one line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(_dump_line(obj))


def write_jsonl(path: Path, objects: Iterable[dict[str, Any]]) -> None:
    """Replace the file with ``objects``, one per line."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(
        "w",
        encoding="utf-8",
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        dir=str(path.parent),
    ) as tmp:
        temp_name = tmp.name
        try:
            for obj in objects:
                tmp.write(_dump_line(obj))
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            Path(temp_name).unlink(missing_ok=True)
            raise

    try:
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
