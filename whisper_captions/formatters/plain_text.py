"""Plain text transcript formatter.

WHY: A readable transcript is handy for proofreading what whisper.cpp
heard without timing noise.

HOW: Concatenates caption texts in order. Captions already carry their
own leading spaces, so plain concatenation restores word spacing.

RULES:
- Output suffix: ".txt"
- Surrounding whitespace is stripped; one trailing newline is added
- No captions → empty file
"""

from __future__ import annotations

from whisper_captions.core.ir import Caption
from whisper_captions.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, captions: list[Caption]) -> list[FormatterOutput]:
        text = "".join(caption.text for caption in captions).strip()
        content = text + "\n" if text else ""

        return [
            FormatterOutput(
                suffix=".txt",
                content=content,
                media_type="text/plain",
            )
        ]
