"""Tests for the incremental XML lexer."""

from typing import List, Tuple

import pytest

from xml_stream_reader.tokenization import (
    LexerState,
    Token,
    TokenPosition,
    TokenType,
    XMLLexer,
)

OPEN = TokenType.OPEN_TAG
CLOSE = TokenType.CLOSE_TAG
TEXT = TokenType.TEXT
NAME = TokenType.ATTRIBUTE_NAME
VALUE = TokenType.ATTRIBUTE_VALUE


def lex(text: str) -> List[Tuple[TokenType, str]]:
    return [(token.type, token.value) for token in XMLLexer.tokenize(text)]


def lex_in_chunks(text: str, size: int) -> List[Tuple[TokenType, str]]:
    tokens: List[Token] = []
    lexer = XMLLexer(sink=tokens.append)
    for offset in range(0, len(text), size):
        lexer.write(text[offset:offset + size])
    return [(token.type, token.value) for token in tokens]


class TestTokenPosition:
    """Test token position validation."""

    def test_valid_position(self) -> None:
        """Test creating a valid position."""
        position = TokenPosition(line=2, column=5, offset=12)
        assert position.line == 2
        assert position.column == 5
        assert position.offset == 12

    @pytest.mark.parametrize("line,column,offset,message", [
        (0, 1, 0, "Line number must be >= 1"),
        (1, 0, 0, "Column number must be >= 1"),
        (1, 1, -1, "Offset must be >= 0"),
    ])
    def test_invalid_position_raises_error(self, line, column, offset, message) -> None:
        """Test that out-of-range values raise ValueError."""
        with pytest.raises(ValueError, match=message):
            TokenPosition(line=line, column=column, offset=offset)


class TestToken:
    """Test token value semantics."""

    def test_tokens_compare_without_position(self) -> None:
        """Test that positions do not take part in equality."""
        first = Token(OPEN, "a", TokenPosition(1, 1, 0))
        second = Token(OPEN, "a", TokenPosition(3, 7, 40))
        assert first == second

    def test_token_type_values(self) -> None:
        """Test the string values of token kinds."""
        assert OPEN.value == "open-tag"
        assert CLOSE.value == "close-tag"
        assert TEXT.value == "text"
        assert NAME.value == "attribute-name"
        assert VALUE.value == "attribute-value"


class TestTags:
    """Test element tag recognition."""

    def test_open_and_close(self) -> None:
        """Test a simple element with text."""
        assert lex("<a>hi</a>") == [(OPEN, "a"), (TEXT, "hi"), (CLOSE, "a")]

    def test_self_closing_emits_open_then_close(self) -> None:
        """Test that <a/> produces both tokens."""
        assert lex("<a/>") == [(OPEN, "a"), (CLOSE, "a")]

    def test_self_closing_with_space(self) -> None:
        """Test that <a /> produces both tokens."""
        assert lex("<a />") == [(OPEN, "a"), (CLOSE, "a")]

    def test_closing_tag_with_trailing_space(self) -> None:
        """Test that whitespace before > in a closing tag is ignored."""
        assert lex("<a></a >") == [(OPEN, "a"), (CLOSE, "a")]

    def test_namespaced_names_kept_verbatim(self) -> None:
        """Test that prefixed names are not split."""
        assert lex("<ns:a></ns:a>") == [(OPEN, "ns:a"), (CLOSE, "ns:a")]

    def test_nested_elements(self) -> None:
        """Test token order for nested elements."""
        assert lex("<a><b/><c></c></a>") == [
            (OPEN, "a"),
            (OPEN, "b"), (CLOSE, "b"),
            (OPEN, "c"), (CLOSE, "c"),
            (CLOSE, "a"),
        ]


class TestText:
    """Test character data handling."""

    def test_whitespace_only_text_is_dropped(self) -> None:
        """Test that indentation between tags produces no tokens."""
        assert lex("<a>\n  <b/>\n</a>") == [
            (OPEN, "a"), (OPEN, "b"), (CLOSE, "b"), (CLOSE, "a"),
        ]

    def test_text_is_not_trimmed(self) -> None:
        """Test that surrounding whitespace of non-blank text is kept."""
        assert lex("<a>  hi there \n</a>") == [
            (OPEN, "a"), (TEXT, "  hi there \n"), (CLOSE, "a"),
        ]

    def test_trailing_text_without_tag_is_not_emitted(self) -> None:
        """Test that text is only flushed when a tag starts."""
        assert lex("<a/>tail") == [(OPEN, "a"), (CLOSE, "a")]

    def test_entities_are_not_decoded(self) -> None:
        """Test that entity references pass through unchanged."""
        assert lex("<a>&amp;&lt;</a>") == [(OPEN, "a"), (TEXT, "&amp;&lt;"), (CLOSE, "a")]

    def test_cdata_becomes_text(self) -> None:
        """Test that CDATA content is emitted verbatim."""
        assert lex("<a><![CDATA[<b> & ]]]></a>") == [
            (OPEN, "a"), (TEXT, "<b> & ]"), (CLOSE, "a"),
        ]

    def test_whitespace_cdata_is_kept(self) -> None:
        """Test that whitespace-only CDATA still yields a text token."""
        assert lex("<a><![CDATA[  ]]></a>") == [(OPEN, "a"), (TEXT, "  "), (CLOSE, "a")]


class TestAttributes:
    """Test attribute recognition."""

    def test_quoted_unquoted_and_bare_attributes(self) -> None:
        """Test the mixed attribute forms, including adjacent quoted values."""
        assert lex("<x a=1 b='2'c=\"3\" d>") == [
            (OPEN, "x"),
            (NAME, "a"), (VALUE, "1"),
            (NAME, "b"), (VALUE, "2"),
            (NAME, "c"), (VALUE, "3"),
            (NAME, "d"), (VALUE, ""),
        ]

    def test_unquoted_value_before_self_close(self) -> None:
        """Test that a/> ends an unquoted value and closes the element."""
        assert lex("<item v=1/>") == [
            (OPEN, "item"), (NAME, "v"), (VALUE, "1"), (CLOSE, "item"),
        ]

    def test_slash_inside_unquoted_value(self) -> None:
        """Test that a / not followed by > is part of the value."""
        assert lex("<a href=x/y>") == [(OPEN, "a"), (NAME, "href"), (VALUE, "x/y")]

    def test_quoted_value_keeps_markup_characters(self) -> None:
        """Test that > and / inside quotes do not end the tag."""
        assert lex("<a t=\"1 > 0/\"/>") == [
            (OPEN, "a"), (NAME, "t"), (VALUE, "1 > 0/"), (CLOSE, "a"),
        ]

    def test_spaces_around_equals(self) -> None:
        """Test that whitespace around = is allowed."""
        assert lex("<a k = 'v'>") == [(OPEN, "a"), (NAME, "k"), (VALUE, "v")]

    def test_bare_attribute_before_self_close(self) -> None:
        """Test a valueless attribute followed by />."""
        assert lex("<a flag/>") == [
            (OPEN, "a"), (NAME, "flag"), (VALUE, ""), (CLOSE, "a"),
        ]


class TestSkippedMarkup:
    """Test constructs that produce no tokens."""

    def test_comment(self) -> None:
        """Test that comments vanish, including markup inside them."""
        assert lex("<a><!-- <b/> -- --></a>") == [(OPEN, "a"), (CLOSE, "a")]

    def test_processing_instruction(self) -> None:
        """Test that the XML declaration is skipped."""
        assert lex('<?xml version="1.0"?><a/>') == [(OPEN, "a"), (CLOSE, "a")]

    def test_doctype_with_internal_subset(self) -> None:
        """Test that bracketed declarations are skipped as a whole."""
        doc = '<!DOCTYPE a [<!ENTITY e "v">]><a/>'
        assert lex(doc) == [(OPEN, "a"), (CLOSE, "a")]

    def test_text_around_comment_is_split(self) -> None:
        """Test that a comment flushes the preceding text run."""
        assert lex("<a>x<!-- c -->y</a>") == [
            (OPEN, "a"), (TEXT, "x"), (TEXT, "y"), (CLOSE, "a"),
        ]


class TestIncrementalWriting:
    """Test chunk-boundary independence of the lexer."""

    DOCUMENT = (
        '<?xml version="1.0"?>\n'
        '<!DOCTYPE root [<!ENTITY e "v">]>\n'
        "<root a=1 b='2'c=\"3\" d>\n"
        "  <item v=1/><item href=x/y/>\n"
        "  <!-- note -->text<![CDATA[<raw>]]>\n"
        "  <hi></discarded>hello</hi >\n"
        "</root>"
    )

    @pytest.mark.parametrize("size", [1, 2, 3, 7, 64])
    def test_chunk_size_does_not_change_tokens(self, size: int) -> None:
        """Test that any chunking yields the same token sequence."""
        assert lex_in_chunks(self.DOCUMENT, size) == lex(self.DOCUMENT)

    def test_reset_discards_partial_state(self) -> None:
        """Test that reset returns the lexer to the data state."""
        tokens: List[Token] = []
        lexer = XMLLexer(sink=tokens.append)
        lexer.write("<root attr='unterminated")
        assert lexer.state is LexerState.ATTR_VALUE

        lexer.reset()
        tokens.clear()
        lexer.write("<a/>")

        assert lexer.state is LexerState.DATA
        assert [(t.type, t.value) for t in tokens] == [(OPEN, "a"), (CLOSE, "a")]

    def test_write_rejects_bytes(self) -> None:
        """Test that the lexer only accepts text."""
        with pytest.raises(TypeError):
            XMLLexer().write(b"<a/>")  # type: ignore


class TestPositions:
    """Test position tracking."""

    def test_positions_point_at_token_start(self) -> None:
        """Test line and column of tags and text."""
        tokens = XMLLexer.tokenize("<a>\n  <b>x</b></a>")
        positions = {(t.type, t.value): t.position for t in tokens}

        assert positions[(OPEN, "a")] == TokenPosition(1, 1, 0)
        assert positions[(OPEN, "b")] == TokenPosition(2, 3, 6)
        assert positions[(TEXT, "x")] == TokenPosition(2, 6, 9)

    def test_position_property_tracks_input(self) -> None:
        """Test that position reports the next character."""
        lexer = XMLLexer()
        lexer.write("<a>\nxy")
        assert lexer.position == TokenPosition(2, 3, 6)

    def test_debug_logs_tokens(self, caplog) -> None:
        """Test that debug mode logs every emitted token."""
        caplog.set_level("DEBUG", logger="xml_stream_reader.tokenization.tokenizer")
        lexer = XMLLexer(debug=True)
        lexer.write("<a/>")
        messages = [r for r in caplog.records if r.getMessage() == "Token emitted"]
        assert [r.token_type for r in messages] == ["open-tag", "close-tag"]
