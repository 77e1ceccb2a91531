"""Tests for the extraction stage."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from arbflow.core.errors import ArbWriteError, InvalidLLMResponseError, ResponseFormatError
from arbflow.core.types import FileStatus
from arbflow.pipeline import extraction
from arbflow.pipeline.extraction import ExtractionStage, parse_extraction_response
from arbflow.prompts.invoker import PromptInvoker
from tests.conftest import FakeLLMClient, final, read_json


def _by_source(replies: dict[str, str]):
    """Responder picking the reply whose key appears in the Dart content."""

    def responder(system: str, human: str) -> str:
        dart = human.split("DART=", 1)[1]
        for needle, reply in replies.items():
            if needle in dart:
                return reply
        raise AssertionError(f"No scripted reply for {dart!r}")

    return responder


def _stage(prompt_store, responder, arb_path: Path) -> tuple[ExtractionStage, FakeLLMClient]:
    client = FakeLLMClient(responder)
    return ExtractionStage(PromptInvoker(client, prompt_store), arb_path, "en"), client


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestParseExtractionResponse:
    def test_json_only(self):
        result = parse_extraction_response('<JSON>{"bye": "Bye"}</JSON>')
        assert result.entries == {"bye": "Bye"}
        assert result.updated_source is None

    def test_json_and_dart(self):
        answer = '<JSON>\n{"bye": "Bye"}\n</JSON>\n<dart>\nText(l10n.bye)\n</dart>'
        result = parse_extraction_response(answer)
        assert result.entries == {"bye": "Bye"}
        assert result.updated_source == "Text(l10n.bye)\n"

    def test_bare_json_without_wrappers(self):
        assert parse_extraction_response('{"a": "b"}').entries == {"a": "b"}

    def test_empty_json_segment_is_empty_object(self):
        result = parse_extraction_response("<JSON></JSON>")
        assert result.entries == {}
        assert result.updated_source is None

    def test_empty_dart_block_means_no_rewrite(self):
        assert parse_extraction_response("{}<dart>\n</dart>").updated_source is None

    def test_malformed_json_raises(self):
        with pytest.raises(ResponseFormatError, match="Malformed JSON") as info:
            parse_extraction_response("<JSON>{oops</JSON>")
        assert "{oops" in info.value.raw

    def test_json_array_rejected(self):
        with pytest.raises(ResponseFormatError):
            parse_extraction_response("[1, 2]")


class TestExtractionStage:
    @pytest.mark.asyncio
    async def test_merges_entries_into_source_arb(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        arb.write_text('{"greeting": "Hi"}', encoding="utf-8")
        dart = _write(tmp_path / "a.dart", "Text('Bye')")
        stage, _ = _stage(
            prompt_store, lambda s, h: final('<JSON>{"farewell": "Bye"}</JSON>'), arb
        )

        outcomes = await stage.run([dart])

        assert read_json(arb) == {"farewell": "Bye", "greeting": "Hi"}
        assert outcomes[0].status == FileStatus.PROCESSED
        assert outcomes[0].new_keys == ["farewell"]
        assert stage.accumulator == {"farewell": "Bye"}
        assert (tmp_path / "app_en.arb.bak").read_text(encoding="utf-8") == '{"greeting": "Hi"}'

    @pytest.mark.asyncio
    async def test_missing_arb_file_is_created(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        dart = _write(tmp_path / "a.dart", "Text('Bye')")
        stage, _ = _stage(prompt_store, lambda s, h: final('{"bye": "Bye"}'), arb)

        await stage.run([dart])

        assert read_json(arb) == {"bye": "Bye"}

    @pytest.mark.asyncio
    async def test_missing_file_is_skipped(self, tmp_path, prompt_store, caplog):
        arb = tmp_path / "app_en.arb"
        dart = _write(tmp_path / "a.dart", "Text('A')")
        stage, client = _stage(prompt_store, lambda s, h: final('{"a": "A"}'), arb)

        outcomes = await stage.run([str(tmp_path / "gone.dart"), dart])

        assert [o.status for o in outcomes] == [FileStatus.SKIPPED, FileStatus.PROCESSED]
        assert len(client.calls) == 1
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_rewritten_source_is_written_with_backup(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        dart = _write(tmp_path / "a.dart", "Text('Bye')\n")
        reply = final('<JSON>{"bye": "Bye"}</JSON><dart>Text(l10n.bye)</dart>')
        stage, _ = _stage(prompt_store, lambda s, h: reply, arb)

        outcomes = await stage.run([dart])

        assert outcomes[0].status == FileStatus.REWRITTEN
        assert Path(dart).read_text(encoding="utf-8") == "Text(l10n.bye)\n"
        assert Path(dart + ".bak").read_text(encoding="utf-8") == "Text('Bye')\n"

    @pytest.mark.asyncio
    async def test_accumulator_new_wins_but_disk_keeps_first(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        first = _write(tmp_path / "a.dart", "FIRST")
        second = _write(tmp_path / "b.dart", "SECOND")
        stage, _ = _stage(
            prompt_store,
            _by_source({
                "FIRST": final('{"title": "From A"}'),
                "SECOND": final('{"title": "From B", "other": "O"}'),
            }),
            arb,
        )

        await stage.run([first, second])

        assert stage.accumulator == {"title": "From B", "other": "O"}
        assert read_json(arb) == {"title": "From A", "other": "O"}

    @pytest.mark.asyncio
    async def test_later_files_see_earlier_entries(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        arb.write_text('{"greeting": "Hi"}', encoding="utf-8")
        first = _write(tmp_path / "a.dart", "FIRST")
        second = _write(tmp_path / "b.dart", "SECOND")
        stage, client = _stage(
            prompt_store,
            _by_source({"FIRST": final('{"one": "1"}'), "SECOND": final("{}")}),
            arb,
        )

        await stage.run([first, second])

        context = client.calls[1][1].split("DART=")[0]
        assert '"one": "1"' in context
        assert '"greeting": "Hi"' in context
        assert "LANG=en" in client.calls[1][1]

    @pytest.mark.asyncio
    async def test_malformed_json_aborts_without_writing(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        arb.write_text('{"greeting": "Hi"}', encoding="utf-8")
        first = _write(tmp_path / "a.dart", "FIRST")
        second = _write(tmp_path / "b.dart", "SECOND")
        stage, _ = _stage(
            prompt_store,
            _by_source({"FIRST": final("<JSON>{not json</JSON>"), "SECOND": final("{}")}),
            arb,
        )

        with pytest.raises(ResponseFormatError):
            await stage.run([first, second])

        assert read_json(arb) == {"greeting": "Hi"}
        assert not (tmp_path / "app_en.arb.bak").exists()

    @pytest.mark.asyncio
    async def test_missing_marker_aborts_without_writing(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        arb.write_text("{}", encoding="utf-8")
        dart = _write(tmp_path / "a.dart", "Text('x')")
        stage, _ = _stage(prompt_store, lambda s, h: '{"x": "x"}', arb)

        with pytest.raises(InvalidLLMResponseError):
            await stage.run([dart])

        assert arb.read_text(encoding="utf-8") == "{}"
        assert Path(dart).read_text(encoding="utf-8") == "Text('x')"

    @pytest.mark.asyncio
    async def test_arb_write_failure_is_fatal(self, tmp_path, prompt_store):
        arb = tmp_path / "app_en.arb"
        arb.mkdir()
        dart = _write(tmp_path / "a.dart", "Text('x')")
        stage, _ = _stage(prompt_store, lambda s, h: final('{"x": "x"}'), arb)

        with pytest.raises(ArbWriteError):
            await stage.run([dart])

    @pytest.mark.asyncio
    async def test_source_rewrite_failure_continues(self, tmp_path, prompt_store, monkeypatch):
        arb = tmp_path / "app_en.arb"
        first = _write(tmp_path / "a.dart", "FIRST")
        second = _write(tmp_path / "b.dart", "SECOND")
        real_write = extraction.atomic_write

        def flaky_write(path, content, **kwargs):
            if Path(path).name == "a.dart":
                raise PermissionError("read-only source")
            return real_write(path, content, **kwargs)

        monkeypatch.setattr(extraction, "atomic_write", flaky_write)
        stage, _ = _stage(
            prompt_store,
            _by_source({
                "FIRST": final('{"a": "A"}<dart>NEW FIRST</dart>'),
                "SECOND": final('{"b": "B"}'),
            }),
            arb,
        )

        outcomes = await stage.run([first, second])

        assert [o.status for o in outcomes] == [FileStatus.FAILED, FileStatus.PROCESSED]
        assert "read-only" in outcomes[0].error
        assert Path(first).read_text(encoding="utf-8") == "FIRST"
        assert json.loads(arb.read_text(encoding="utf-8")) == {"b": "B", "a": "A"}
