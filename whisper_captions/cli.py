"""Command-line interface for Whisper Captions.

WHY: Users need a simple way to turn a recording (or a saved whisper.cpp
transcription) into caption files from the terminal. The CLI wires
together input validation, whisper.cpp, caption assembly, the pluggable
formatters, and file saving behind a single command.

HOW: Uses argparse to accept an input file, model/language options,
assembly options, output format selection and output directory. A .wav
input is transcribed with whisper.cpp via asyncio.run(); a .json input
is read as whisper.cpp JSON-full output. Status messages go to stderr;
output files are saved next to the source (or to --output-dir).

RULES:
- Positional argument: .wav audio file or .json whisper.cpp output
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-captions-2.json)
- Status output goes to stderr (not stdout)
- Any error → "Error: ..." on stderr and exit code 1; Ctrl-C → exit code 130
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import jsonschema

from whisper_captions.config import LOG_FORMAT, LOG_LEVEL, LOG_LEVELS, SUPPORTED_AUDIO_FORMATS
from whisper_captions.core.assembler import assemble_captions, count_content_tokens
from whisper_captions.core.ir import Caption
from whisper_captions.formatters import FORMATTERS
from whisper_captions.formatters.base import FormatterOutput
from whisper_captions.recognizer.models import load_transcription
from whisper_captions.recognizer.whisper_cpp import WhisperCpp, WhisperError

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the converter multiple times on the same file.
    Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. clip-captions.json)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. clip-captions-2.json, clip-2.srt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    # "-captions.json" → ("-captions", ".json"), ".srt" → ("", ".srt")
    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 text and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_format_keys(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())

    format_keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in format_keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            _fail("Unknown format '{}'. Available formats: {}".format(key, available))
    return format_keys


def _on_progress(fraction: float) -> None:
    _status("  Transcribing... {:.0f}%".format(fraction * 100))


async def _captions_from_audio(input_path: Path, args: argparse.Namespace) -> List[Caption]:
    whisper = WhisperCpp(model=args.model, language=args.language)
    _status("Transcribing {} with whisper.cpp...".format(input_path.name))
    return await whisper.create_captions(
        input_path,
        on_progress=_on_progress,
        strict=args.strict,
        unicode_whitespace=args.unicode_whitespace,
    )


def _captions_from_json(input_path: Path, args: argparse.Namespace) -> List[Caption]:
    _status("Loading whisper.cpp output {}...".format(input_path.name))
    transcription = load_transcription(input_path)
    _status("  {} records, {} content tokens, language: {}, model: {}".format(
        len(transcription.records),
        count_content_tokens(transcription.records),
        transcription.language or "unknown",
        transcription.model_type or "unknown",
    ))
    return assemble_captions(
        transcription.records,
        strict=args.strict,
        unicode_whitespace=args.unicode_whitespace,
    )


def _run_pipeline(args: argparse.Namespace) -> None:
    """Execute the full caption pipeline.

    RULES:
    - Validate input and output paths before running whisper.cpp
    - Status messages to stderr at each step
    - Save each formatter's output files with conflict avoidance
    """
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    if ext != ".json" and ext not in SUPPORTED_AUDIO_FORMATS:
        supported = sorted(SUPPORTED_AUDIO_FORMATS | {".json"})
        _fail("Unsupported file type '{}'. Supported: {}".format(ext, ", ".join(supported)))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    format_keys = _parse_format_keys(args.formats)

    try:
        if ext == ".json":
            captions = _captions_from_json(input_path, args)
        else:
            captions = asyncio.run(_captions_from_audio(input_path, args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (WhisperError, jsonschema.ValidationError, ValueError, OSError) as e:
        # CaptionTimingError, UnsupportedAudioError and JSON decode errors
        # are ValueErrors; WhisperTimeoutError is an OSError.
        logger.debug("Caption pipeline failed for %s", input_path, exc_info=True)
        _fail(str(e))

    _status("  Assembled {} captions".format(len(captions)))

    _status("Formatting output...")
    saved_files: List[Path] = []
    try:
        for key in format_keys:
            formatter = FORMATTERS[key]()
            _status("  Running {} formatter...".format(formatter.name))
            for output in formatter.format(captions):
                saved_path = _save_output(output, input_path.stem, output_dir)
                saved_files.append(saved_path)
                _status("  Saved: {}".format(saved_path.name))
    except (jsonschema.ValidationError, OSError) as e:
        logger.debug("Saving output failed for %s", input_path, exc_info=True)
        _fail(str(e))

    _status("")
    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without running
    the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="whisper_captions",
        description="Turn a WAV recording or a whisper.cpp JSON-full transcription "
                    "into caption files (caption JSON, SRT, plain text).",
    )

    parser.add_argument(
        "input_file",
        help="Path to a .wav file to transcribe, or a whisper.cpp .json output file.",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="whisper.cpp model name, e.g. medium.en (default: WHISPER_MODEL from .env).",
    )

    parser.add_argument(
        "--language",
        default=None,
        help="Spoken language passed to whisper.cpp (default: WHISPER_LANGUAGE or "
             "whisper.cpp's own default).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on records whose offsets run backwards instead of passing them through.",
    )

    parser.add_argument(
        "--unicode-whitespace",
        action="store_true",
        help="Treat any Unicode whitespace at token boundaries as a word break "
             "(default: ASCII space only).",
    )

    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=LOG_LEVELS,
        help="Logging level (default: %(default)s).",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m whisper_captions`` and ``whisper-captions``.

    argv=None means use sys.argv; explicit argv is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)
    _run_pipeline(args)


if __name__ == "__main__":
    main()
