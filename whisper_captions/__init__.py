"""Whisper Captions — token-level transcription to display-ready captions.

WHY: whisper.cpp with token-level timestamps emits records of sub-word
tokens, interleaved with internal control tokens. A video burn-in step
needs whole caption entries with a start and end time in milliseconds.

HOW: Three stages — recognize (whisper.cpp runner or a saved JSON-full
file), assemble (core caption fold), format (pluggable formatters). Each
stage is independently testable.

RULES:
- The assembler is pure: no I/O, no state across calls
- All formatters consume the same list of Caption objects
- Adding a new output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
