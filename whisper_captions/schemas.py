"""Bundled JSON schema loading.

WHY: The whisper.cpp input schema and the caption JSON output schema
ship as files next to the code that validates against them. Both are
read the same way and neither changes while the process runs.

HOW: load_schema() reads a schema file once and keeps it in a
module-level cache keyed by its resolved path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_CACHED_SCHEMAS: dict[Path, dict[str, Any]] = {}


def load_schema(path: Path) -> dict[str, Any]:
    """Load a JSON schema from disk, cached after the first call per path."""
    key = Path(path).resolve()
    if key not in _CACHED_SCHEMAS:
        with open(key, encoding="utf-8") as f:
            _CACHED_SCHEMAS[key] = json.load(f)
    return _CACHED_SCHEMAS[key]
