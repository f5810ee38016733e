"""SRT caption formatter.

WHY: Editors and players load SRT directly, which makes it the easiest
way to check assembled captions against the audio before rendering.

HOW: Each caption becomes one SRT block: 1-based index, a
``HH:MM:SS,mmm --> HH:MM:SS,mmm`` line from the caption's millisecond
times, and the caption text with surrounding spaces stripped.

RULES:
- Output suffix: ".srt"; media type "application/x-subrip"
- Captions whose stripped text is empty are skipped; numbering stays
  contiguous
- Times are written as assembled: no minimum duration, no overlap fixes
- Negative times (malformed input) are clamped to 00:00:00,000 in the
  timestamp line only
"""

from typing import List

from whisper_captions.core.ir import Caption
from whisper_captions.formatters.base import BaseFormatter, FormatterOutput


def ms_to_srt_time(ms: int) -> str:
    """Convert milliseconds to SRT timestamp format: HH:MM:SS,mmm"""
    ms = max(ms, 0)
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def generate_srt(captions: List[Caption]) -> str:
    """Generate SRT content from captions."""
    lines = []
    index = 0

    for caption in captions:
        text = caption.text.strip()
        if not text:
            continue
        index += 1
        lines.append(str(index))
        lines.append("{} --> {}".format(
            ms_to_srt_time(caption.start_ms), ms_to_srt_time(caption.end_ms)
        ))
        lines.append(text)
        lines.append("")

    return "\n".join(lines)


class SRTCaptionFormatter(BaseFormatter):
    """Formatter that writes one SRT file with one block per caption."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    def format(self, captions: List[Caption]) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".srt",
                content=generate_srt(captions),
                media_type="application/x-subrip",
            )
        ]
