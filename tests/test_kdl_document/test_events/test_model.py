"""Tests for the event model and the event cursor."""

import pytest

from kdl_document.events import Event, EventCursor, EventKind
from kdl_document.shared.errors import ParseError
from kdl_document.values import Integer, Null


class TestEvent:
    """Test event factories and rendering."""

    def test_factories(self):
        """Test each factory sets the kind and payload."""
        assert Event.start_node("a") == Event(EventKind.START_NODE, "a", None)
        assert Event.start_node("a", "t") == Event(EventKind.START_NODE, "a", Null("t"))
        assert Event.argument(Integer(1)) == Event(EventKind.ARGUMENT, "", Integer(1))
        assert Event.property("k", Integer(1)) == Event(EventKind.PROPERTY, "k", Integer(1))
        assert Event.end_node().kind is EventKind.END_NODE
        assert Event.eof().kind is EventKind.EOF
        assert Event.parse_error("bad") == Event(EventKind.PARSE_ERROR, "bad")

    def test_str(self):
        """Test the diagnostic rendering."""
        assert str(Event.argument(Integer(5, "u8"))) == (
            "Event{kind: argument, name: '', value: (u8)integer(5)}"
        )
        assert str(Event.end_node()) == "Event{kind: end_node, name: '', value: None}"


class TestEventCursor:
    """Test single-event lookahead."""

    def test_advance(self):
        """Test advancing makes each event current in turn."""
        cursor = EventCursor([Event.start_node("a"), Event.end_node(), Event.eof()])

        assert cursor.current is None
        assert cursor.advance() == Event.start_node("a")
        assert cursor.current == Event.start_node("a")
        assert cursor.advance() == Event.end_node()
        assert cursor.pulled == 2

    def test_eof_is_sticky(self):
        """Test the cursor keeps returning EOF without pulling further."""
        cursor = EventCursor(iter([Event.eof(), Event.start_node("late")]))

        assert cursor.advance() == Event.eof()
        assert cursor.advance() == Event.eof()
        assert cursor.pulled == 1

    def test_exhausted_source(self):
        """Test a source that runs dry leaves the cursor at None."""
        cursor = EventCursor([])
        assert cursor.advance() is None

    def test_parse_error_is_terminal(self):
        """Test a parse error raises and every later pull fails."""
        cursor = EventCursor([Event.parse_error("unterminated string"), Event.eof()])

        with pytest.raises(ParseError, match="unterminated string"):
            cursor.advance()
        with pytest.raises(ParseError, match="parse error already reached"):
            cursor.advance()
