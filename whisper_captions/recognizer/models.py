"""whisper.cpp JSON-full output parsing.

WHY: whisper.cpp writes its token-level transcription as a JSON file
(``-ojf``). The file carries system info, model parameters and per-token
details the caption step does not need. Parsing it into typed Records
at the boundary keeps the assembler free of whisper.cpp specifics.

HOW: The raw dict is validated against whisper_output_schema.json with
jsonschema, then each ``transcription`` entry becomes a Record.

RULES:
- Schema violations raise jsonschema.ValidationError before any parsing
- Extra whisper.cpp fields are tolerated and ignored
- language / model_type are None when whisper.cpp omits them
- With ``-ml 1`` whisper.cpp can split a multibyte character across
  tokens and writes the partial bytes as-is; they decode to U+FFFD
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from whisper_captions.core.ir import Record
from whisper_captions.schemas import load_schema

_SCHEMA_PATH = Path(__file__).resolve().parent / "whisper_output_schema.json"


@dataclass
class WhisperTranscription:
    """A parsed whisper.cpp transcription.

    RULES:
    - records: one Record per ``transcription`` entry, in file order
    - language: detected/forced language code from ``result.language``
    - model_type: whisper model size from ``model.type`` (e.g. "medium")
    """

    records: list[Record] = field(default_factory=list)
    language: str | None = None
    model_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WhisperTranscription:
        """Validate and parse a whisper.cpp JSON-full payload.

        Raises:
            jsonschema.ValidationError: If the payload does not have the
                transcription/offsets/tokens shape captions are built from.
        """
        jsonschema.validate(instance=data, schema=load_schema(_SCHEMA_PATH))

        return cls(
            records=[Record.from_dict(r) for r in data["transcription"]],
            language=data.get("result", {}).get("language"),
            model_type=data.get("model", {}).get("type"),
        )


def load_transcription(path: Path | str) -> WhisperTranscription:
    """Read a whisper.cpp JSON-full file from disk and parse it."""
    with open(path, encoding="utf-8", errors="replace") as f:
        data = json.load(f)
    return WhisperTranscription.from_dict(data)
