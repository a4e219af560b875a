"""
Unit tests for InteractiveMapper (x_influx.mappers.interactive).

Keyboard input is simulated with a scripted prompt function that
raises ``EOFError`` when the script runs out, like ``input()`` on C-d.
"""

from __future__ import annotations

from datetime import datetime, timezone

from x_influx.layout import Layout
from x_influx.mappers import InteractiveMapper


class ScriptedPrompt:
    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, text: str) -> str:
        self.prompts.append(text)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def _mapper(prompt: ScriptedPrompt) -> InteractiveMapper:
    return InteractiveMapper(prompt=prompt, echo=lambda _text: None)


class TestInteractiveMapper:
    def test_single_entry(self, store, writer):
        prompt = ScriptedPrompt("21.5", "2017-10-10 00:00:00", "kitchen,1")
        summary = _mapper(prompt).import_data(Layout(tags="room,floor"), writer)
        writer.join()

        assert summary.rows_sent == 1
        (rec,) = store.records
        assert rec.field == ("data", "21.5")
        assert rec.tags == (("room", "kitchen"), ("floor", "1"))
        ts = datetime(2017, 10, 10, tzinfo=timezone.utc)
        assert rec.timestamp_ns == int(ts.timestamp()) * 1_000_000_000

    def test_prompts_show_layout_hints(self):
        prompt = ScriptedPrompt("1", "2017-10-10 00:00:00", "")
        layout = Layout(measure="power", time="ts", tformat="%F %T", tags="room,,floor")
        _mapper(prompt).read_entry(layout)
        assert prompt.prompts == [
            "Measurement [power]: ",
            "Time [ts][%F %T]: ",
            "Tags [room,floor]: ",
        ]

    def test_eof_ends_import(self, writer):
        summary = _mapper(ScriptedPrompt()).import_data(Layout(), writer)
        assert summary.rows_sent == 0
        assert summary.rows_skipped == 0

    def test_bad_time_discards_entry_and_continues(self, store, writer):
        prompt = ScriptedPrompt(
            "1", "not a time", "",
            "2", "2017-10-10 00:01:00", "",
        )
        summary = _mapper(prompt).import_data(Layout(), writer)
        writer.join()
        assert summary.rows_skipped == 1
        assert [r.field[1] for r in store.records] == ["2"]

    def test_fewer_tag_values_truncate(self, store, writer):
        prompt = ScriptedPrompt("1", "2017-10-10 00:00:00", "kitchen")
        _mapper(prompt).import_data(Layout(tags="room,floor"), writer)
        writer.join()
        assert store.records[0].tags == (("room", "kitchen"),)

    def test_more_tag_values_truncate(self, store, writer):
        prompt = ScriptedPrompt("1", "2017-10-10 00:00:00", "kitchen,1,extra")
        _mapper(prompt).import_data(Layout(tags="room"), writer)
        writer.join()
        assert store.records[0].tags == (("room", "kitchen"),)

    def test_empty_tag_names_skipped_in_pairing(self, store, writer):
        prompt = ScriptedPrompt("1", "2017-10-10 00:00:00", "a,b")
        _mapper(prompt).import_data(Layout(tags=",room,,floor"), writer)
        writer.join()
        assert store.records[0].tags == (("room", "a"), ("floor", "b"))

    def test_no_tags_configured(self, store, writer):
        prompt = ScriptedPrompt("1", "2017-10-10 00:00:00", "ignored")
        _mapper(prompt).import_data(Layout(), writer)
        writer.join()
        assert store.records[0].tags == ()

    def test_intro_echoed(self, writer):
        lines: list[str] = []
        InteractiveMapper(prompt=ScriptedPrompt(), echo=lines.append).import_data(
            Layout(), writer
        )
        assert lines[0] == "Interactive mode..."
        assert "C-d" in lines[1]
