"""Caption assembly from whisper.cpp token-level records.

WHY: With token-level timestamps whisper.cpp splits words into pieces
like [" hel", "lo"] spread over several records, and mixes in internal
control tokens ("[_TT_50]"). The rendering step needs whole captions
with a single start and end time.

HOW: One left-to-right pass. Records with empty text are skipped whole.
Control tokens are dropped. A token without a leading space that follows
a caption without a trailing space continues that caption; anything else
starts a new caption.

RULES:
- Empty record text → skip the record, its tokens are never inspected
- Token text starting with "[_TT" → discard
- Caption exists + no leading space on token + no trailing space on
  caption → merge: append the RECORD's text, end_ms = record's to offset
- Otherwise → new caption (token text, record from, record to)
- First content token always starts a new caption
- Empty token text does not start with whitespace
- Whitespace test is an ASCII space check unless unicode_whitespace=True
- Timing is passed through untouched unless strict=True
- Output is returned as assembled: no trimming, no post-pass merging
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from whisper_captions.core.ir import Caption, Record, Token

# Prefix of whisper.cpp's internal special tokens (timestamps, etc.).
CONTROL_TOKEN_PREFIX = "[_TT"


class CaptionTimingError(ValueError):
    """Raised in strict mode when record offsets are malformed.

    WHY: The default behavior passes bad offsets through and produces
    captions with implausible durations. Callers that would rather fail
    loudly opt into strict mode.

    RULES:
    - Raised for a record whose from offset is after its to offset
    - Raised for a record that starts before the previous record started
    - Only non-empty records are checked
    """


def is_control_token(text: str) -> bool:
    """Return True if the token text is a recognizer-internal control token."""
    return text.startswith(CONTROL_TOKEN_PREFIX)


def _starts_with_space(text: str, unicode_whitespace: bool) -> bool:
    if unicode_whitespace:
        return text[:1].isspace()
    return text.startswith(" ")


def _ends_with_space(text: str, unicode_whitespace: bool) -> bool:
    if unicode_whitespace:
        return text[-1:].isspace()
    return text.endswith(" ")


def _continues(
    token_text: str,
    previous: Caption | None,
    unicode_whitespace: bool,
) -> bool:
    """Decide whether a token extends the previous caption."""
    return (
        previous is not None
        and not _starts_with_space(token_text, unicode_whitespace)
        and not _ends_with_space(previous.text, unicode_whitespace)
    )


def _content_tokens(
    records: Iterable[Record],
    strict: bool,
) -> Iterator[tuple[Record, Token]]:
    """Yield (record, token) for every token that can affect a caption."""
    previous_from: int | None = None
    for record in records:
        if record.text == "":
            continue

        if strict:
            _check_timing(record, previous_from)
            previous_from = record.offsets.from_ms

        for token in record.tokens:
            if is_control_token(token.text):
                continue
            yield record, token


def _check_timing(record: Record, previous_from: int | None) -> None:
    offsets = record.offsets
    if offsets.from_ms > offsets.to_ms:
        raise CaptionTimingError(
            "Record {!r} ends before it starts ({} > {} ms)".format(
                record.text, offsets.from_ms, offsets.to_ms
            )
        )
    if previous_from is not None and offsets.from_ms < previous_from:
        raise CaptionTimingError(
            "Record {!r} starts at {} ms, before the previous record at {} ms".format(
                record.text, offsets.from_ms, previous_from
            )
        )


def assemble_captions(
    records: Iterable[Record],
    strict: bool = False,
    unicode_whitespace: bool = False,
) -> list[Caption]:
    """Assemble recognizer records into display-ready captions.

    WHY: This is the bridge between whisper.cpp's token-level output and
    the caption list the rendering step burns into the video.

    HOW: Keeps a growing caption list and only ever mutates its last
    element. See the module docstring for the merge rule.

    RULES:
    - The merge appends record.text, not token.text. For a record holding
      several continuation tokens the record text is appended once per
      token; this matches the reference output and is kept on purpose.
    - No state survives between calls

    Args:
        records: Ordered recognizer records.
        strict: Raise CaptionTimingError on malformed offsets instead of
            passing them through.
        unicode_whitespace: Treat any Unicode whitespace character at the
            token/caption boundary as a word break, not just ASCII space.

    Returns:
        Ordered list of Caption objects, owned by the caller.
    """
    captions: list[Caption] = []

    for record, token in _content_tokens(records, strict):
        previous = captions[-1] if captions else None
        if _continues(token.text, previous, unicode_whitespace):
            previous.text += record.text
            previous.end_ms = record.offsets.to_ms
            continue

        captions.append(Caption(
            text=token.text,
            start_ms=record.offsets.from_ms,
            end_ms=record.offsets.to_ms,
        ))

    return captions


def iter_captions(
    records: Iterable[Record],
    strict: bool = False,
    unicode_whitespace: bool = False,
) -> Iterator[Caption]:
    """Lazily assemble captions, yielding each one once it is final.

    A caption is final when the next caption starts or the input ends,
    so a consumer never sees a caption that is later extended. Produces
    the same sequence as assemble_captions() with the same options.
    """
    pending: Caption | None = None

    for record, token in _content_tokens(records, strict):
        if _continues(token.text, pending, unicode_whitespace):
            pending.text += record.text
            pending.end_ms = record.offsets.to_ms
            continue

        if pending is not None:
            yield pending
        pending = Caption(
            text=token.text,
            start_ms=record.offsets.from_ms,
            end_ms=record.offsets.to_ms,
        )

    if pending is not None:
        yield pending


def count_content_tokens(records: Iterable[Record]) -> int:
    """Count tokens that can produce or extend a caption.

    This is the upper bound on len(assemble_captions(records)): control
    tokens and tokens of empty-text records are not counted.
    """
    return sum(
        1
        for record in records
        if record.text != ""
        for token in record.tokens
        if not is_control_token(token.text)
    )
