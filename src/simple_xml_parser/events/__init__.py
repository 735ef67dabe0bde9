"""Event layer: recursive-descent parser and the sinks it reports to.

Key Components:
    EventParser: Parses a text buffer and emits structural events
    EventSink: Interface implemented by every event consumer
    CallbackSink, RecordingSink, PrintingSink, TeeSink: Stock sinks
"""

from .parser import EventParser
from .sink import (
    CallbackSink,
    Event,
    EventSink,
    EventType,
    PrintingSink,
    RecordingSink,
    TeeSink,
)

__all__ = [
    "CallbackSink",
    "Event",
    "EventParser",
    "EventSink",
    "EventType",
    "PrintingSink",
    "RecordingSink",
    "TeeSink",
]
