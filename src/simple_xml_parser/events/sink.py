"""Event sink interface and stock sink implementations.

The parser reports structure through an ``EventSink`` and never depends on a
concrete consumer. The same parse can print events, record them, build a tree
or feed several consumers at once through ``TeeSink``.
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional, TextIO


class EventType(Enum):
    """Structural events emitted by the parser."""

    TAG_OPEN = auto()
    TAG_CLOSE = auto()
    TEXT = auto()
    COMMENT = auto()
    ATTRIBUTE = auto()


@dataclass(frozen=True)
class Event:
    """A single recorded event.

    ``name`` is the tag or attribute name, ``value`` the text, comment body or
    attribute value. Unused fields are empty strings.
    """

    type: EventType
    name: str = ""
    value: str = ""


class EventSink(ABC):
    """Consumer of parser events."""

    @abstractmethod
    def on_tag_open(self, name: str) -> None:
        """Called when a tag is opened, before its attributes."""

    @abstractmethod
    def on_tag_close(self, name: str) -> None:
        """Called when a tag is closed, including self-closing tags."""

    @abstractmethod
    def on_text(self, text: str) -> None:
        """Called with text content of the innermost open tag; may be empty."""

    @abstractmethod
    def on_comment(self, text: str) -> None:
        """Called with the verbatim body of a comment."""

    @abstractmethod
    def on_attribute(self, name: str, value: str) -> None:
        """Called for each attribute of the most recently opened tag."""


class CallbackSink(EventSink):
    """Sink that forwards events to plain callables.

    Callbacks that are not supplied ignore their events.
    """

    def __init__(
        self,
        on_tag_open: Optional[Callable[[str], None]] = None,
        on_tag_close: Optional[Callable[[str], None]] = None,
        on_text: Optional[Callable[[str], None]] = None,
        on_comment: Optional[Callable[[str], None]] = None,
        on_attribute: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self._on_tag_open = on_tag_open
        self._on_tag_close = on_tag_close
        self._on_text = on_text
        self._on_comment = on_comment
        self._on_attribute = on_attribute

    def on_tag_open(self, name: str) -> None:
        if self._on_tag_open is not None:
            self._on_tag_open(name)

    def on_tag_close(self, name: str) -> None:
        if self._on_tag_close is not None:
            self._on_tag_close(name)

    def on_text(self, text: str) -> None:
        if self._on_text is not None:
            self._on_text(text)

    def on_comment(self, text: str) -> None:
        if self._on_comment is not None:
            self._on_comment(text)

    def on_attribute(self, name: str, value: str) -> None:
        if self._on_attribute is not None:
            self._on_attribute(name, value)


class RecordingSink(EventSink):
    """Sink that records every event in order."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def on_tag_open(self, name: str) -> None:
        self.events.append(Event(EventType.TAG_OPEN, name=name))

    def on_tag_close(self, name: str) -> None:
        self.events.append(Event(EventType.TAG_CLOSE, name=name))

    def on_text(self, text: str) -> None:
        self.events.append(Event(EventType.TEXT, value=text))

    def on_comment(self, text: str) -> None:
        self.events.append(Event(EventType.COMMENT, value=text))

    def on_attribute(self, name: str, value: str) -> None:
        self.events.append(Event(EventType.ATTRIBUTE, name=name, value=value))

    def of_type(self, event_type: EventType) -> List[Event]:
        """Return recorded events of one type."""
        return [event for event in self.events if event.type == event_type]

    def clear(self) -> None:
        """Forget all recorded events."""
        self.events.clear()


class PrintingSink(EventSink):
    """Sink that writes an indented event listing to a stream.

    Output lines look like ``BEGIN TAG: a``, ``ATTRIBUTE: id=1``,
    ``TEXT: hi``, ``COMMENT: note`` and ``END TAG: a``; each nesting level is
    indented by ``indent``.
    """

    def __init__(self, stream: Optional[TextIO] = None, indent: str = "  ") -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.indent = indent
        self.depth = 0

    def _write(self, line: str) -> None:
        self.stream.write(f"{self.indent * self.depth}{line}\n")

    def on_tag_open(self, name: str) -> None:
        self._write(f"BEGIN TAG: {name}")
        self.depth += 1

    def on_tag_close(self, name: str) -> None:
        self.depth = max(0, self.depth - 1)
        self._write(f"END TAG: {name}")

    def on_text(self, text: str) -> None:
        self._write(f"TEXT: {text}")

    def on_comment(self, text: str) -> None:
        self._write(f"COMMENT: {text}")

    def on_attribute(self, name: str, value: str) -> None:
        self._write(f"ATTRIBUTE: {name}={value}")


class TeeSink(EventSink):
    """Sink that forwards every event to several sinks in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = list(sinks)

    @classmethod
    def of(cls, sinks: Iterable[EventSink]) -> "TeeSink":
        """Build a tee from any iterable of sinks."""
        return cls(*sinks)

    def on_tag_open(self, name: str) -> None:
        for sink in self.sinks:
            sink.on_tag_open(name)

    def on_tag_close(self, name: str) -> None:
        for sink in self.sinks:
            sink.on_tag_close(name)

    def on_text(self, text: str) -> None:
        for sink in self.sinks:
            sink.on_text(text)

    def on_comment(self, text: str) -> None:
        for sink in self.sinks:
            sink.on_comment(text)

    def on_attribute(self, name: str, value: str) -> None:
        for sink in self.sinks:
            sink.on_attribute(name, value)
