"""whisper.cpp recognizer package — the upstream boundary of the converter.

WHY: The caption assembler consumes Records. This package produces them,
either by running a local whisper.cpp binary or by reading a JSON-full
file whisper.cpp wrote earlier.

HOW: whisper_cpp.py runs the binary as an async subprocess; models.py
validates and parses the JSON output into Records.

RULES:
- All whisper.cpp process handling goes through WhisperCpp
- Recognition itself is a black box; only its JSON output is interpreted
"""

from whisper_captions.recognizer.models import WhisperTranscription, load_transcription
from whisper_captions.recognizer.whisper_cpp import WhisperCpp, WhisperError

__all__ = ["WhisperCpp", "WhisperError", "WhisperTranscription", "load_transcription"]
