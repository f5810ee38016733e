"""Async runner for a locally installed whisper.cpp binary.

WHY: Captions need token-level timing, which whisper.cpp provides when
run with a maximum segment length of one token and full JSON output.
This module hides the command line, progress parsing, temp files and
process lifecycle behind one class so callers (CLI, tests) only deal
with Records and Captions.

HOW: WhisperCpp builds the whisper.cpp command, runs it with
asyncio.create_subprocess_exec inside a temporary directory, forwards
progress lines from stderr, then parses the written JSON file.
create_captions() chains transcription with the caption assembler.

RULES:
- whisper.cpp must already be installed; nothing is downloaded here
- Executable: build/bin/whisper-cli for versions >= 1.7.4, else main
- Model file: <install>/models/ggml-<model>.bin
- Command always includes -ml 1 (token-level records) and -ojf
- The process is killed on timeout or cancellation
- Progress callback (on_progress) is optional; receives a 0.0-1.0 fraction
"""

from __future__ import annotations

import asyncio
import logging
import re
import tempfile
from collections import deque
from collections.abc import Callable
from pathlib import Path

from whisper_captions.config import (
    SUPPORTED_AUDIO_FORMATS,
    WHISPER_INSTALL_PATH,
    WHISPER_LANGUAGE,
    WHISPER_MODEL,
    WHISPER_TIMEOUT_S,
    WHISPER_VERBOSE,
    WHISPER_VERSION,
)
from whisper_captions.core.assembler import assemble_captions
from whisper_captions.core.ir import Caption
from whisper_captions.recognizer.models import WhisperTranscription, load_transcription

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# whisper.cpp renamed its main example binary to whisper-cli in 1.7.4.
_WHISPER_CLI_MIN_VERSION = (1, 7, 4)

_PROGRESS_RE = re.compile(r"progress\s*=\s*(\d+)%")

_STDERR_TAIL_LINES = 20

_OUTPUT_STEM = "transcription"


class WhisperError(Exception):
    """Raised when whisper.cpp fails to produce a transcription.

    RULES:
    - message includes the exit code and the last stderr lines when the
      process itself failed
    """


class WhisperNotInstalledError(WhisperError):
    """Raised when the whisper.cpp executable is not where config says."""


class WhisperModelNotFoundError(WhisperError):
    """Raised when the ggml model file for the configured model is missing."""


class UnsupportedAudioError(ValueError):
    """Raised when the input is missing or not a format whisper.cpp reads.

    Raised before the process is started.
    """


class WhisperTimeoutError(TimeoutError):
    """Raised when whisper.cpp runs longer than the configured timeout.

    The process has already been killed when this is raised.
    """


def _parse_version(version: str) -> tuple[int, ...]:
    """Parse "1.7.4" / "v1.5.5" into a comparable tuple."""
    return tuple(int(part) for part in re.findall(r"\d+", version)[:3])


class WhisperCpp:
    """Runs whisper.cpp on a WAV file and returns token-level records.

    RULES:
    - Every constructor argument defaults to the matching config value
    - One subprocess per transcribe() call; instances hold no job state,
      so one instance may serve concurrent calls
    """

    def __init__(
        self,
        install_path: Path | str | None = None,
        model: str | None = None,
        version: str | None = None,
        verbose: bool | None = None,
        language: str | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self._install_path = Path(install_path or WHISPER_INSTALL_PATH)
        self._model = model or WHISPER_MODEL
        self._version = version or WHISPER_VERSION
        self._verbose = WHISPER_VERBOSE if verbose is None else verbose
        self._language = language or WHISPER_LANGUAGE
        self._timeout_s = timeout_s or WHISPER_TIMEOUT_S

    @property
    def executable_path(self) -> Path:
        if _parse_version(self._version) >= _WHISPER_CLI_MIN_VERSION:
            return self._install_path / "build" / "bin" / "whisper-cli"
        return self._install_path / "main"

    @property
    def model_path(self) -> Path:
        return self._install_path / "models" / "ggml-{}.bin".format(self._model)

    def build_command(self, audio_path: Path, output_stem: Path) -> list[str]:
        """Build the whisper.cpp argument list.

        ``-ml 1`` limits each record to a single token so record offsets
        act as token timestamps. ``-ojf`` writes <output_stem>.json with
        tokens included.
        """
        cmd = [
            str(self.executable_path),
            "-f", str(audio_path),
            "-m", str(self.model_path),
            "-ml", "1",
            "-ojf",
            "-of", str(output_stem),
            "--print-progress",
        ]
        if self._language:
            cmd.extend(["-l", self._language])
        return cmd

    def _validate(self, audio_path: Path) -> None:
        if not audio_path.is_file():
            raise UnsupportedAudioError("Audio file not found: {}".format(audio_path))
        if audio_path.suffix.lower() not in SUPPORTED_AUDIO_FORMATS:
            raise UnsupportedAudioError(
                "Unsupported audio type '{}'. whisper.cpp reads: {}".format(
                    audio_path.suffix, ", ".join(sorted(SUPPORTED_AUDIO_FORMATS))
                )
            )
        if not self.executable_path.is_file():
            raise WhisperNotInstalledError(
                "whisper.cpp executable not found at {}. "
                "Set WHISPER_INSTALL_PATH and WHISPER_VERSION in the .env file.".format(
                    self.executable_path
                )
            )
        if not self.model_path.is_file():
            raise WhisperModelNotFoundError(
                "whisper.cpp model '{}' not found at {}".format(self._model, self.model_path)
            )

    async def transcribe(
        self,
        audio_path: Path | str,
        on_progress: Callable[[float], None] | None = None,
    ) -> WhisperTranscription:
        """Run whisper.cpp on a WAV file and parse its JSON output.

        Args:
            audio_path: Path to a 16 kHz WAV file.
            on_progress: Optional callback, called with 0.0-1.0 as
                whisper.cpp reports progress.

        Returns:
            The parsed WhisperTranscription.

        Raises:
            UnsupportedAudioError: Missing file or unsupported extension.
            WhisperNotInstalledError / WhisperModelNotFoundError: Bad install.
            WhisperTimeoutError: The run exceeded the timeout.
            WhisperError: Non-zero exit code or no JSON output written.
        """
        audio_path = Path(audio_path)
        self._validate(audio_path)

        with tempfile.TemporaryDirectory(prefix="whisper-captions-") as tmp_dir:
            output_stem = Path(tmp_dir) / _OUTPUT_STEM
            cmd = self.build_command(audio_path, output_stem)
            logger.debug("Running whisper.cpp: %s", " ".join(cmd))

            await self._run(cmd, audio_path, on_progress)

            output_path = output_stem.with_suffix(".json")
            if not output_path.is_file():
                raise WhisperError(
                    "whisper.cpp finished but wrote no output for {}".format(audio_path)
                )
            return load_transcription(output_path)

    async def _run(
        self,
        cmd: list[str],
        audio_path: Path,
        on_progress: Callable[[float], None] | None,
    ) -> None:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=None if self._verbose else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        stderr_tail: deque[str] = deque(maxlen=_STDERR_TAIL_LINES)

        try:
            returncode = await asyncio.wait_for(
                self._communicate(process, audio_path, stderr_tail, on_progress),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            raise WhisperTimeoutError(
                "whisper.cpp timed out on {} after {:.0f}s".format(audio_path, self._timeout_s)
            )
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        if returncode != 0:
            raise WhisperError(
                "whisper.cpp exited with code {}: {}".format(
                    returncode, "\n".join(stderr_tail) or "(no output)"
                )
            )

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        audio_path: Path,
        stderr_tail: deque[str],
        on_progress: Callable[[float], None] | None,
    ) -> int:
        """Read stderr line by line until EOF, then wait for exit."""
        assert process.stderr is not None
        while True:
            raw = await process.stderr.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip()
            stderr_tail.append(line)

            match = _PROGRESS_RE.search(line)
            if match:
                percent = int(match.group(1))
                logger.debug("Transcribing %s is %d%% complete", audio_path, percent)
                if on_progress:
                    on_progress(percent / 100.0)
            elif self._verbose:
                logger.debug("whisper.cpp: %s", line)

        return await process.wait()

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            process.kill()
            await process.wait()

    async def create_captions(
        self,
        audio_path: Path | str,
        on_progress: Callable[[float], None] | None = None,
        strict: bool = False,
        unicode_whitespace: bool = False,
    ) -> list[Caption]:
        """Transcribe a WAV file and assemble its captions.

        Args:
            audio_path: Path to a 16 kHz WAV file.
            on_progress: Optional progress callback (0.0-1.0).
            strict: Passed to assemble_captions().
            unicode_whitespace: Passed to assemble_captions().

        Returns:
            Ordered list of Caption objects.
        """
        logger.debug("Starting to transcribe audio %s", audio_path)
        transcription = await self.transcribe(audio_path, on_progress=on_progress)
        logger.debug(
            "Transcription of %s finished (%d records), creating captions",
            audio_path, len(transcription.records),
        )

        captions = assemble_captions(
            transcription.records,
            strict=strict,
            unicode_whitespace=unicode_whitespace,
        )
        logger.debug("Created %d captions for %s", len(captions), audio_path)
        return captions
