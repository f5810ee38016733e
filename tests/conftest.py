"""Shared test fixtures for the whisper_captions test suite.

WHY: Several test modules need the same whisper.cpp sample output.
Centralizing it here keeps the sample consistent between the parser,
assembler, runner and CLI tests.

HOW: WHISPER_OUTPUT is a trimmed whisper.cpp ``-ml 1 -ojf`` payload for
the phrase "Hello world, hi." with the usual control tokens
([_BEG_]-style timestamp tokens starting with "[_TT") and one empty
record. Fixtures expose the raw dict, parsed Records, and a JSON file.

RULES:
- Offsets are integer milliseconds, as whisper.cpp writes them
- EXPECTED_CAPTIONS is the assembled output for WHISPER_OUTPUT
"""

import copy
import json
from typing import Any, Dict, List

import pytest

from whisper_captions.core.ir import Caption, Record


def _token(text: str, offset_from: int, offset_to: int, token_id: int) -> Dict[str, Any]:
    """A whisper.cpp token with the extra fields the parser must ignore."""
    return {
        "text": text,
        "timestamps": {"from": "00:00:00,000", "to": "00:00:00,000"},
        "offsets": {"from": offset_from, "to": offset_to},
        "id": token_id,
        "p": 0.95,
        "t_dtw": -1,
    }


def _record(text: str, offset_from: int, offset_to: int, tokens: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "timestamps": {"from": "00:00:00,000", "to": "00:00:00,000"},
        "offsets": {"from": offset_from, "to": offset_to},
        "text": text,
        "tokens": tokens,
    }


WHISPER_OUTPUT: Dict[str, Any] = {
    "systeminfo": "AVX = 1 | AVX2 = 1 | NEON = 0",
    "model": {"type": "medium", "multilingual": False, "vocab": 51864},
    "params": {"model": "models/ggml-medium.en.bin", "language": "en", "translate": False},
    "result": {"language": "en"},
    "transcription": [
        _record(" Hel", 0, 240, [
            _token("[_TT_0]", 0, 0, 50364),
            _token(" Hel", 0, 240, 15117),
        ]),
        _record("lo", 240, 420, [
            _token("lo", 240, 420, 75),
        ]),
        _record("", 420, 420, [
            _token(" ignored", 420, 420, 99),
        ]),
        _record(" world", 500, 900, [
            _token(" world", 500, 900, 995),
        ]),
        _record(",", 900, 950, [
            _token(",", 900, 950, 11),
        ]),
        _record(" hi", 1200, 1400, [
            _token(" hi", 1200, 1400, 23105),
            _token("[_TT_70]", 1400, 1400, 50434),
        ]),
        _record(".", 1400, 1500, [
            _token(".", 1400, 1500, 13),
        ]),
    ],
}

EXPECTED_CAPTIONS: List[Caption] = [
    Caption(text=" Hello", start_ms=0, end_ms=420),
    Caption(text=" world,", start_ms=500, end_ms=950),
    Caption(text=" hi.", start_ms=1200, end_ms=1500),
]


@pytest.fixture
def whisper_output():
    """A fresh copy of the sample whisper.cpp JSON-full payload."""
    return copy.deepcopy(WHISPER_OUTPUT)


@pytest.fixture
def sample_records(whisper_output):
    """The sample payload parsed into Records."""
    return [Record.from_dict(r) for r in whisper_output["transcription"]]


@pytest.fixture
def expected_captions():
    return copy.deepcopy(EXPECTED_CAPTIONS)


@pytest.fixture
def whisper_json_file(tmp_path, whisper_output):
    """The sample payload written to disk as clip.json."""
    path = tmp_path / "clip.json"
    path.write_text(json.dumps(whisper_output), encoding="utf-8")
    return path
