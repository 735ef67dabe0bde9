"""Tests for event sinks."""

import io
from unittest.mock import Mock

import pytest

from simple_xml_parser.events import (
    CallbackSink,
    Event,
    EventParser,
    EventSink,
    EventType,
    PrintingSink,
    RecordingSink,
    TeeSink,
)


class TestEventSinkInterface:
    """Test the abstract sink interface."""

    def test_cannot_instantiate(self):
        """Test the abstract sink cannot be instantiated."""
        with pytest.raises(TypeError):
            EventSink()

    def test_partial_implementation_rejected(self):
        """Test a partial sink implementation cannot be instantiated."""
        class TagsOnly(EventSink):
            def on_tag_open(self, name):
                pass

            def on_tag_close(self, name):
                pass

        with pytest.raises(TypeError):
            TagsOnly()


class TestRecordingSink:
    """Test event recording."""

    def test_records_in_order(self):
        """Test events are recorded in order."""
        sink = RecordingSink()
        EventParser().parse('<a k="v">t<!--c--></a>', sink)
        assert sink.events == [
            Event(EventType.TAG_OPEN, name="a"),
            Event(EventType.ATTRIBUTE, name="k", value="v"),
            Event(EventType.TEXT, value="t"),
            Event(EventType.COMMENT, value="c"),
            Event(EventType.TAG_CLOSE, name="a"),
        ]

    def test_of_type_and_clear(self):
        """Test filtering and clearing recorded events."""
        sink = RecordingSink()
        EventParser().parse("<a><b/><c/></a>", sink)
        assert [event.name for event in sink.of_type(EventType.TAG_OPEN)] == ["a", "b", "c"]
        sink.clear()
        assert sink.events == []


class TestCallbackSink:
    """Test forwarding to callables."""

    def test_callbacks_receive_events(self):
        """Test callbacks receive their events."""
        opened = []
        attributes = []
        sink = CallbackSink(
            on_tag_open=opened.append,
            on_attribute=lambda name, value: attributes.append((name, value)),
        )
        EventParser().parse('<a x="1"><b/></a>', sink)
        assert opened == ["a", "b"]
        assert attributes == [("x", "1")]

    def test_missing_callbacks_are_ignored(self):
        """Test missing callbacks are ignored."""
        sink = CallbackSink()
        EventParser().parse("<a>text<!--c--></a>", sink)

    def test_sink_exceptions_propagate(self):
        """Test an exception raised by a sink aborts the parse unchanged."""
        def refuse(name):
            raise RuntimeError(f"no {name}")

        sink = CallbackSink(on_tag_open=refuse)
        with pytest.raises(RuntimeError, match="no a"):
            EventParser().parse("<a/>", sink)


class TestPrintingSink:
    """Test the indented event listing."""

    def test_listing(self):
        """Test the event listing output."""
        stream = io.StringIO()
        EventParser().parse('<a x="1">hi<!--c--><b/></a>', PrintingSink(stream))
        assert stream.getvalue().splitlines() == [
            "BEGIN TAG: a",
            "  ATTRIBUTE: x=1",
            "  TEXT: hi",
            "  COMMENT: c",
            "  BEGIN TAG: b",
            "  END TAG: b",
            "END TAG: a",
        ]

    def test_custom_indent(self):
        """Test dump with a custom indent."""
        stream = io.StringIO()
        EventParser().parse("<a><b/></a>", PrintingSink(stream, indent="\t"))
        assert stream.getvalue() == "BEGIN TAG: a\n\tBEGIN TAG: b\n\tEND TAG: b\nEND TAG: a\n"

    def test_defaults_to_stdout(self, capsys):
        """Test printing defaults to stdout."""
        EventParser().parse("<a/>", PrintingSink())
        assert capsys.readouterr().out == "BEGIN TAG: a\nEND TAG: a\n"


class TestTeeSink:
    """Test fan-out to several sinks."""

    def test_forwards_to_all(self):
        """Test events are forwarded to every sink."""
        first = RecordingSink()
        second = RecordingSink()
        EventParser().parse('<a x="1">t</a>', TeeSink(first, second))
        assert first.events == second.events
        assert len(first.events) == 4

    def test_forwards_in_order(self):
        """Test events are forwarded in order."""
        calls = Mock()
        first = CallbackSink(on_text=calls.first)
        second = CallbackSink(on_text=calls.second)
        EventParser().parse("<a>t</a>", TeeSink.of([first, second]))
        assert [call[0] for call in calls.mock_calls] == ["first", "second"]
