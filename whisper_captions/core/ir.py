"""Intermediate representation dataclasses for recognizer records and captions.

WHY: whisper.cpp returns nested JSON with many fields the caption step
never looks at. The IR keeps only what assembly needs (record text,
token text, record offsets) and defines the caption shape handed to the
rendering step, decoupling recognition from formatting.

HOW: Four dataclasses:
  Token   — one recognizer token (text only; timing comes from its record)
  Offsets — start/end of a record in integer milliseconds
  Record  — the recognizer's unit of output: text, tokens, offsets
  Caption — one display unit with text and a millisecond time span

RULES:
- Times are integer milliseconds throughout (no float seconds)
- Token has no timing of its own; every caption drawn from a record uses
  that record's offsets
- Caption.to_dict() is the downstream wire shape: text, startMs, endMs
- from_dict() parsers do no validation beyond field access
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Token:
    """A single recognizer token inside a record.

    RULES:
    - text may be empty, may start with a space, may be a control token
      such as "[_TT_50]"
    """

    text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        return cls(text=data["text"])


@dataclass
class Offsets:
    """Start and end of a record in milliseconds.

    The JSON keys are ``from`` and ``to``; ``from`` is a Python keyword, so
    the attributes are named from_ms / to_ms.
    """

    from_ms: int
    to_ms: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Offsets:
        return cls(from_ms=int(data["from"]), to_ms=int(data["to"]))

    def to_dict(self) -> dict[str, int]:
        return {"from": self.from_ms, "to": self.to_ms}


@dataclass
class Record:
    """One timestamped unit of recognizer output.

    WHY: whisper.cpp groups tokens into records ("segments" in its own
    vocabulary). With ``-ml 1`` most records hold a single word piece plus
    control tokens, and the record offsets are the finest timing available.

    RULES:
    - text: the record's aggregate text; an empty string means the whole
      record is skipped during assembly
    - tokens: ordered Token list, may be empty
    - offsets: shared by every caption created from this record
    """

    text: str
    offsets: Offsets
    tokens: list[Token] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        """Parse a record from ``{text, tokens: [{text}], offsets: {from, to}}``.

        Extra keys (whisper.cpp timestamps strings, token ids, probabilities)
        are ignored. A missing ``tokens`` key means no tokens.
        """
        return cls(
            text=data["text"],
            offsets=Offsets.from_dict(data["offsets"]),
            tokens=[Token.from_dict(t) for t in data.get("tokens", [])],
        )


@dataclass
class Caption:
    """A display-ready caption with text and a time span in milliseconds.

    WHY: The rendering step burns each caption into the frames between
    start_ms and end_ms. The assembler grows a caption in place while
    sub-word continuations keep arriving.

    RULES:
    - start_ms is set when the caption is created and never changes
    - end_ms is overwritten each time the caption is extended
    - text is kept exactly as assembled: leading spaces are not stripped
    """

    text: str
    start_ms: int
    end_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "startMs": self.start_ms, "endMs": self.end_ms}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Caption:
        return cls(
            text=data["text"],
            start_ms=int(data["startMs"]),
            end_ms=int(data["endMs"]),
        )
