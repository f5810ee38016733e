"""Output formatter registry — pluggable caption format hub.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new formats: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["caption_json"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisper_captions.formatters.caption_json import CaptionJSONFormatter
from whisper_captions.formatters.plain_text import PlainTextFormatter
from whisper_captions.formatters.srt_captions import SRTCaptionFormatter

if TYPE_CHECKING:
    from whisper_captions.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "caption_json": CaptionJSONFormatter,
    "srt_captions": SRTCaptionFormatter,
    "plain_text": PlainTextFormatter,
}
