"""Tests for IR parsing and whisper.cpp JSON-full output parsing.

WHY: The parser is the upstream boundary. If it drops tokens, misreads
offsets or accepts a payload without the fields assembly relies on, the
captions are wrong before the assembler even runs.

HOW: Parse the shared whisper.cpp sample and hand-made variants; check
schema rejection paths with pytest.raises.
"""

import json

import jsonschema
import pytest

from whisper_captions.core.ir import Caption, Offsets, Record, Token
from whisper_captions.recognizer.models import WhisperTranscription, load_transcription


class TestRecordFromDict:

    def test_generic_shape(self):
        record = Record.from_dict({
            "text": " hi",
            "tokens": [{"text": "[_TT_0]"}, {"text": " hi"}],
            "offsets": {"from": 100, "to": 300},
        })
        assert record.text == " hi"
        assert record.offsets == Offsets(from_ms=100, to_ms=300)
        assert record.tokens == [Token(text="[_TT_0]"), Token(text=" hi")]

    def test_missing_tokens_means_empty(self):
        record = Record.from_dict({"text": "x", "offsets": {"from": 0, "to": 1}})
        assert record.tokens == []

    def test_offsets_round_trip_keys(self):
        assert Offsets(from_ms=5, to_ms=9).to_dict() == {"from": 5, "to": 9}


class TestCaptionDict:

    def test_downstream_shape(self):
        caption = Caption(text=" hello", start_ms=0, end_ms=300)
        assert caption.to_dict() == {"text": " hello", "startMs": 0, "endMs": 300}

    def test_from_dict(self):
        caption = Caption.from_dict({"text": "a", "startMs": 1, "endMs": 2})
        assert caption == Caption(text="a", start_ms=1, end_ms=2)


class TestWhisperTranscription:

    def test_parses_sample(self, whisper_output):
        transcription = WhisperTranscription.from_dict(whisper_output)
        assert len(transcription.records) == 7
        assert transcription.language == "en"
        assert transcription.model_type == "medium"

    def test_records_keep_control_tokens(self, whisper_output):
        transcription = WhisperTranscription.from_dict(whisper_output)
        first = transcription.records[0]
        assert [t.text for t in first.tokens] == ["[_TT_0]", " Hel"]
        assert first.offsets == Offsets(from_ms=0, to_ms=240)

    def test_empty_record_kept_for_assembler(self, whisper_output):
        transcription = WhisperTranscription.from_dict(whisper_output)
        assert transcription.records[2].text == ""
        assert transcription.records[2].tokens == [Token(text=" ignored")]

    def test_minimal_payload(self):
        transcription = WhisperTranscription.from_dict({"transcription": []})
        assert transcription.records == []
        assert transcription.language is None
        assert transcription.model_type is None

    def test_missing_transcription_rejected(self):
        with pytest.raises(jsonschema.ValidationError):
            WhisperTranscription.from_dict({"result": {"language": "en"}})

    def test_missing_offsets_rejected(self, whisper_output):
        del whisper_output["transcription"][0]["offsets"]
        with pytest.raises(jsonschema.ValidationError):
            WhisperTranscription.from_dict(whisper_output)

    def test_string_offsets_rejected(self, whisper_output):
        whisper_output["transcription"][1]["offsets"]["from"] = "240"
        with pytest.raises(jsonschema.ValidationError):
            WhisperTranscription.from_dict(whisper_output)

    def test_token_without_text_rejected(self, whisper_output):
        whisper_output["transcription"][1]["tokens"] = [{"id": 75}]
        with pytest.raises(jsonschema.ValidationError):
            WhisperTranscription.from_dict(whisper_output)


class TestLoadTranscription:

    def test_load_from_file(self, whisper_json_file):
        transcription = load_transcription(whisper_json_file)
        assert len(transcription.records) == 7

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_transcription(path)

    def test_partial_utf8_token_decodes_to_replacement_char(self, tmp_path, whisper_output):
        # "é" split across two tokens: each side is a lone UTF-8 byte on disk
        whisper_output["transcription"][1]["text"] = "@LEAD@"
        whisper_output["transcription"][1]["tokens"][0]["text"] = "@LEAD@"
        whisper_output["transcription"][3]["tokens"][0]["text"] = "@TAIL@"
        raw = json.dumps(whisper_output).encode("utf-8")
        raw = raw.replace(b"@LEAD@", b"\xc3").replace(b"@TAIL@", b"\xa9")
        path = tmp_path / "cafe.json"
        path.write_bytes(raw)

        transcription = load_transcription(path)

        assert transcription.records[1].text == "\ufffd"
        assert transcription.records[1].tokens == [Token(text="\ufffd")]
        assert transcription.records[3].tokens == [Token(text="\ufffd")]
        assert len(transcription.records) == 7
