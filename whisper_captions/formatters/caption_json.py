"""Caption JSON formatter — the rendering step's input format.

WHY: The video rendering step reads captions as a JSON array of
``{text, startMs, endMs}`` objects and shows each one on screen between
its two times. This formatter writes exactly that shape.

HOW: Serializes each Caption via Caption.to_dict() and validates the
array against captions_schema.json with jsonschema before returning.

RULES:
- Output suffix: "-captions.json"
- Caption text is written as assembled (leading spaces kept)
- Validate output against the schema before returning; raise on failure
- No timing adjustments of any kind
"""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema

from whisper_captions.core.ir import Caption
from whisper_captions.formatters.base import BaseFormatter, FormatterOutput
from whisper_captions.schemas import load_schema

_SCHEMA_PATH = Path(__file__).resolve().parent / "captions_schema.json"


class CaptionJSONFormatter(BaseFormatter):
    """Formatter producing the ``[{text, startMs, endMs}]`` caption array."""

    @property
    def name(self) -> str:
        return "Caption JSON"

    def format(self, captions: list[Caption]) -> list[FormatterOutput]:
        """Serialize captions to a validated JSON array.

        Raises:
            jsonschema.ValidationError: If the generated JSON does not
                conform to the caption schema.
        """
        output = [caption.to_dict() for caption in captions]
        jsonschema.validate(instance=output, schema=load_schema(_SCHEMA_PATH))

        content = json.dumps(output, indent=2, ensure_ascii=False)

        return [
            FormatterOutput(
                suffix="-captions.json",
                content=content,
                media_type="application/json",
            )
        ]
