"""Incremental XML scanner for plate extraction.

This module feeds an entry stream to an lxml pull parser chunk by chunk
and drives an explicit state machine that recognizes record elements and
the plate field nested inside them. Records are yielded as soon as their
closing tag is parsed, so documents of any size scan in bounded memory.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from lxml import etree

from core.constants import (
    DEFAULT_FEED_SLICE_SIZE,
    DEFAULT_FIELD_TAG,
    DEFAULT_RECORD_TAG,
    DEFAULT_SCAN_CHUNK_SIZE,
)
from core.errors import DocumentParseError
from core.types import PlateRecord


class ScanState(enum.Enum):
    """Position of the scanner relative to record and field elements."""

    OUTSIDE = "outside"
    IN_RECORD = "in_record"
    IN_RECORD_IN_FIELD = "in_record_in_field"


class ScanEventKind(enum.Enum):
    START = "start"
    TEXT = "text"
    END = "end"


@dataclass(frozen=True)
class ScanEvent:
    """One markup token: an element boundary or its text."""

    kind: ScanEventKind
    tag: str
    text: str = ""


@dataclass(frozen=True)
class ParseState:
    """Per-entry parse state."""

    state: ScanState = ScanState.OUTSIDE
    pending_text: str | None = None

    @property
    def in_record(self) -> bool:
        return self.state is not ScanState.OUTSIDE

    @property
    def in_field(self) -> bool:
        return self.state is ScanState.IN_RECORD_IN_FIELD


INITIAL_STATE = ParseState()


def advance(
    current: ParseState,
    event: ScanEvent,
    record_tag: str = DEFAULT_RECORD_TAG,
    field_tag: str = DEFAULT_FIELD_TAG,
) -> tuple[ParseState, str | None]:
    """Apply one event to the parse state.

    Args:
        current: State before the event.
        event: Markup token to apply.
        record_tag: Local name of the record boundary element.
        field_tag: Local name of the plate field element.

    Returns:
        The next state and the identifier completed by this event, if any.
    """
    if event.kind is ScanEventKind.START:
        if event.tag == record_tag:
            return ParseState(ScanState.IN_RECORD, None), None
        if event.tag == field_tag and current.in_record:
            return ParseState(ScanState.IN_RECORD_IN_FIELD, current.pending_text), None
        return current, None
    if event.kind is ScanEventKind.TEXT:
        if current.in_field:
            return ParseState(current.state, event.text), None
        return current, None
    if event.tag == field_tag:
        next_state = ScanState.IN_RECORD if current.in_record else ScanState.OUTSIDE
        return ParseState(next_state, current.pending_text), None
    if event.tag == record_tag:
        return INITIAL_STATE, current.pending_text or None
    return current, None


class DocumentScanner:
    """Extract plate records from XML entry streams."""

    def __init__(
        self,
        record_tag: str = DEFAULT_RECORD_TAG,
        field_tag: str = DEFAULT_FIELD_TAG,
        chunk_size: int = DEFAULT_SCAN_CHUNK_SIZE,
        feed_slice_size: int = DEFAULT_FEED_SLICE_SIZE,
    ) -> None:
        self._record_tag = record_tag
        self._field_tag = field_tag
        self._chunk_size = chunk_size
        self._feed_slice_size = min(feed_slice_size, chunk_size)

    def scan(self, stream: BinaryIO, entry_name: str) -> Iterator[PlateRecord]:
        """Yield plate records from one XML document.

        Parse state starts fresh for every call. End of input finishes the
        scan quietly; an empty stream yields nothing. Chunks are fed to the
        parser in small slices so a reported byte position lies within one
        slice of the fault.

        Raises:
            DocumentParseError: When the markup is malformed. Records
                yielded before the error remain valid.
        """
        run = _EntryScan(self._record_tag, self._field_tag)
        parser = etree.XMLPullParser(
            events=("start", "end"),
            resolve_entities=False,
            no_network=True,
            huge_tree=True,
        )
        etree.clear_error_log()
        consumed = 0
        while True:
            chunk = stream.read(self._chunk_size)
            if not chunk:
                break
            for start in range(0, len(chunk), self._feed_slice_size):
                piece = chunk[start : start + self._feed_slice_size]
                consumed += len(piece)
                try:
                    parser.feed(piece)
                except etree.XMLSyntaxError as error:
                    yield from run.drain_after_error(parser)
                    raise DocumentParseError(entry_name, consumed, _describe(error)) from error
                yield from run.drain(parser)
        if consumed == 0:
            return
        try:
            parser.close()
        except etree.XMLSyntaxError as error:
            yield from run.drain_after_error(parser)
            raise DocumentParseError(entry_name, consumed, _describe(error)) from error
        yield from run.drain(parser)


class _EntryScan:
    """Parse state for one entry, fed from pull parser events."""

    def __init__(self, record_tag: str, field_tag: str) -> None:
        self._record_tag = record_tag
        self._field_tag = field_tag
        self.state = INITIAL_STATE

    def drain(self, parser: etree.XMLPullParser) -> Iterator[PlateRecord]:
        for action, element in parser.read_events():
            tag = etree.QName(element).localname
            if action == "start":
                yield from self._apply(ScanEvent(ScanEventKind.START, tag))
                continue
            text = (element.text or "").strip()
            if text:
                yield from self._apply(ScanEvent(ScanEventKind.TEXT, tag, text))
            yield from self._apply(ScanEvent(ScanEventKind.END, tag))
            if tag == self._record_tag:
                _release(element)

    def drain_after_error(self, parser: etree.XMLPullParser) -> Iterator[PlateRecord]:
        """Yield records parsed before a syntax error was raised."""
        try:
            yield from self.drain(parser)
        except etree.XMLSyntaxError:
            return

    def _apply(self, event: ScanEvent) -> Iterator[PlateRecord]:
        self.state, identifier = advance(self.state, event, self._record_tag, self._field_tag)
        if identifier:
            yield PlateRecord(identifier=identifier)


def _release(element: etree._Element) -> None:
    """Free a finished record and its already-processed siblings."""
    element.clear()
    parent = element.getparent()
    if parent is None:
        return
    while element.getprevious() is not None:
        del parent[0]


def _describe(error: etree.XMLSyntaxError) -> str:
    """Describe the first error libxml2 logged for this document.

    Some faults, such as undefined entities, only stop the parser and
    surface at close as a generic error; the log keeps the real cause.
    """
    logged = error.error_log.filter_from_errors()
    if len(logged) == 0:
        return error.msg
    first = logged[0]
    return f"{first.message.strip()}, line {first.line}, column {first.column}"
