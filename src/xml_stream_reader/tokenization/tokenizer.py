"""Incremental XML lexer producing structural tokens.

This module implements a character-level state machine that turns markup text
into the five token kinds consumed by the tree assembler. All lexer state
lives on the instance, so input may be written in chunks of any size, down to
single characters, without changing the token sequence.

Comments, processing instructions and ``<!...>`` declarations are skipped;
CDATA sections become text tokens; entities are left undecoded.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from xml_stream_reader.shared import get_logger

COMMENT_OPEN = "--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "[CDATA["
CDATA_CLOSE = "]]>"
PI_CLOSE = "?>"
QUOTE_CHARS = ("'", '"')


class TokenType(Enum):
    """Structural token kinds delivered to the tree assembler."""

    OPEN_TAG = "open-tag"
    CLOSE_TAG = "close-tag"
    TEXT = "text"
    ATTRIBUTE_NAME = "attribute-name"
    ATTRIBUTE_VALUE = "attribute-value"


class LexerState(Enum):
    """State machine states for the lexer."""

    DATA = auto()                    # Character content between tags
    TAG_BEGIN = auto()               # After <
    TAG_NAME = auto()                # Reading element name
    TAG_END = auto()                 # Waiting for > of a closing tag
    ATTR_NAME_START = auto()         # Between attributes
    ATTR_NAME = auto()               # Reading attribute name
    ATTR_NAME_END = auto()           # Whitespace after attribute name
    ATTR_VALUE_BEGIN = auto()        # After =
    ATTR_VALUE = auto()              # Reading quoted or unquoted value
    ATTR_VALUE_SLASH = auto()        # / inside an unquoted value
    MARKUP_DECLARATION = auto()      # After <!
    COMMENT = auto()                 # Inside <!-- -->
    CDATA = auto()                   # Inside <![CDATA[ ]]>
    DECLARATION = auto()             # Inside <!DOCTYPE ...> and friends
    PROCESSING_INSTRUCTION = auto()  # Inside <? ?>


@dataclass(frozen=True)
class TokenPosition:
    """Position of the first character of a token."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass(frozen=True)
class Token:
    """A single structural token.

    Positions are informational and excluded from equality, so tokens can be
    compared by kind and value alone.
    """

    type: TokenType
    value: str
    position: Optional[TokenPosition] = field(default=None, compare=False)


TokenSink = Callable[[Token], None]


class XMLLexer:
    """Chunk-resumable XML lexer.

    Tokens are pushed to ``sink`` synchronously from inside ``write``.

    Examples:
        >>> [t.value for t in XMLLexer.tokenize('<a x="1">hi</a>')]
        ['a', 'x', '1', 'hi', 'a']
    """

    def __init__(
        self,
        sink: Optional[TokenSink] = None,
        debug: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the lexer.

        Args:
            sink: Callable receiving each token as it is recognised
            debug: Log every emitted token at debug level
            correlation_id: Optional correlation ID for log records
        """
        self.sink = sink
        self.debug = debug
        self.logger = get_logger(__name__, correlation_id, "xml_lexer")

        self._handlers: Dict[LexerState, Callable[[str], None]] = {
            LexerState.DATA: self._process_data,
            LexerState.TAG_BEGIN: self._process_tag_begin,
            LexerState.TAG_NAME: self._process_tag_name,
            LexerState.TAG_END: self._process_tag_end,
            LexerState.ATTR_NAME_START: self._process_attr_name_start,
            LexerState.ATTR_NAME: self._process_attr_name,
            LexerState.ATTR_NAME_END: self._process_attr_name_end,
            LexerState.ATTR_VALUE_BEGIN: self._process_attr_value_begin,
            LexerState.ATTR_VALUE: self._process_attr_value,
            LexerState.ATTR_VALUE_SLASH: self._process_attr_value_slash,
            LexerState.MARKUP_DECLARATION: self._process_markup_declaration,
            LexerState.COMMENT: self._process_comment,
            LexerState.CDATA: self._process_cdata,
            LexerState.DECLARATION: self._process_declaration,
            LexerState.PROCESSING_INSTRUCTION: self._process_processing_instruction,
        }
        self.reset()

    @classmethod
    def tokenize(cls, text: str) -> List[Token]:
        """Tokenize a complete string and return the tokens."""
        tokens: List[Token] = []
        lexer = cls(sink=tokens.append)
        lexer.write(text)
        return tokens

    def reset(self) -> None:
        """Reset lexer state for a new document."""
        self.state = LexerState.DATA
        self._data: List[str] = []
        self._tag_name = ""
        self._attr_name = ""
        self._attr_value = ""
        self._quote = ""
        self._is_closing = False
        self._markup = ""
        self._bracket_depth = 0

        self._line = 1
        self._column = 1
        self._offset = 0
        self._text_start = self._mark()
        self._tag_start = self._text_start
        self._attr_start = self._text_start

    def write(self, chunk: str) -> None:
        """Feed a chunk of markup through the state machine.

        Args:
            chunk: Any slice of the document, including a single character
        """
        if not isinstance(chunk, str):
            raise TypeError("XMLLexer.write expects str chunks")

        for char in chunk:
            self._handlers[self.state](char)
            self._advance(char)

    @property
    def position(self) -> TokenPosition:
        """Position of the next character to be processed."""
        return self._mark()

    def _mark(self) -> TokenPosition:
        return TokenPosition(self._line, self._column, self._offset)

    def _advance(self, char: str) -> None:
        self._offset += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

    def _emit(
        self, token_type: TokenType, value: str, position: TokenPosition
    ) -> None:
        token = Token(type=token_type, value=value, position=position)
        if self.debug:
            self.logger.debug(
                "Token emitted",
                extra={
                    "token_type": token_type.value,
                    "token_value": value,
                    "line": position.line,
                    "column": position.column,
                }
            )
        if self.sink is not None:
            self.sink(token)

    def _emit_attribute(self, value: str) -> None:
        self._emit(TokenType.ATTRIBUTE_VALUE, value, self._attr_start)

    def _emit_bare_attribute(self) -> None:
        """Emit an attribute that has a name but no value."""
        self._emit(TokenType.ATTRIBUTE_NAME, self._attr_name, self._attr_start)
        self._emit(TokenType.ATTRIBUTE_VALUE, "", self._attr_start)

    def _enter_data(self) -> None:
        self._data = []
        self.state = LexerState.DATA

    # State handlers

    def _process_data(self, char: str) -> None:
        if char == "<":
            text = "".join(self._data)
            if text.strip():
                self._emit(TokenType.TEXT, text, self._text_start)
            self._data = []
            self._tag_name = ""
            self._is_closing = False
            self._tag_start = self._mark()
            self.state = LexerState.TAG_BEGIN
        else:
            if not self._data:
                self._text_start = self._mark()
            self._data.append(char)

    def _process_tag_begin(self, char: str) -> None:
        if char.isspace():
            return
        if char == "/":
            self._is_closing = True
        elif char == "!" and not self._is_closing:
            self._markup = ""
            self.state = LexerState.MARKUP_DECLARATION
        elif char == "?" and not self._is_closing:
            self._markup = ""
            self.state = LexerState.PROCESSING_INSTRUCTION
        elif char == ">":
            # <> and </> carry no name
            self._enter_data()
        else:
            self._tag_name = char
            self.state = LexerState.TAG_NAME

    def _process_tag_name(self, char: str) -> None:
        if char.isspace():
            if self._is_closing:
                self.state = LexerState.TAG_END
            else:
                self._emit(TokenType.OPEN_TAG, self._tag_name, self._tag_start)
                self.state = LexerState.ATTR_NAME_START
        elif char == ">":
            token_type = TokenType.CLOSE_TAG if self._is_closing else TokenType.OPEN_TAG
            self._emit(token_type, self._tag_name, self._tag_start)
            self._enter_data()
        elif char == "/":
            if not self._is_closing:
                self._emit(TokenType.OPEN_TAG, self._tag_name, self._tag_start)
            self.state = LexerState.TAG_END
        else:
            self._tag_name += char

    def _process_tag_end(self, char: str) -> None:
        # Anything between the name and > of a closing tag is ignored
        if char == ">":
            self._emit(TokenType.CLOSE_TAG, self._tag_name, self._tag_start)
            self._enter_data()

    def _process_attr_name_start(self, char: str) -> None:
        if char.isspace() or char == "=" or char in QUOTE_CHARS:
            return
        if char == ">":
            self._enter_data()
        elif char == "/":
            self.state = LexerState.TAG_END
        else:
            self._attr_name = char
            self._attr_start = self._mark()
            self.state = LexerState.ATTR_NAME

    def _process_attr_name(self, char: str) -> None:
        if char.isspace():
            self.state = LexerState.ATTR_NAME_END
        elif char == "=":
            self._emit(TokenType.ATTRIBUTE_NAME, self._attr_name, self._attr_start)
            self.state = LexerState.ATTR_VALUE_BEGIN
        elif char == ">":
            self._emit_bare_attribute()
            self._enter_data()
        elif char == "/":
            self._emit_bare_attribute()
            self.state = LexerState.TAG_END
        else:
            self._attr_name += char

    def _process_attr_name_end(self, char: str) -> None:
        if char.isspace():
            return
        if char == "=":
            self._emit(TokenType.ATTRIBUTE_NAME, self._attr_name, self._attr_start)
            self.state = LexerState.ATTR_VALUE_BEGIN
        elif char == ">":
            self._emit_bare_attribute()
            self._enter_data()
        elif char == "/":
            self._emit_bare_attribute()
            self.state = LexerState.TAG_END
        else:
            # Previous attribute had no value; this character starts the next one
            self._emit_bare_attribute()
            self._attr_name = char
            self._attr_start = self._mark()
            self.state = LexerState.ATTR_NAME

    def _process_attr_value_begin(self, char: str) -> None:
        if char.isspace():
            return
        if char == ">":
            self._emit_attribute("")
            self._enter_data()
            return

        self._attr_start = self._mark()
        if char in QUOTE_CHARS:
            self._quote = char
            self._attr_value = ""
        else:
            self._quote = ""
            self._attr_value = char
        self.state = LexerState.ATTR_VALUE

    def _process_attr_value(self, char: str) -> None:
        if self._quote:
            if char == self._quote:
                self._emit_attribute(self._attr_value)
                self.state = LexerState.ATTR_NAME_START
            else:
                self._attr_value += char
        elif char.isspace():
            self._emit_attribute(self._attr_value)
            self.state = LexerState.ATTR_NAME_START
        elif char == ">":
            self._emit_attribute(self._attr_value)
            self._enter_data()
        elif char == "/":
            self.state = LexerState.ATTR_VALUE_SLASH
        else:
            self._attr_value += char

    def _process_attr_value_slash(self, char: str) -> None:
        # An unquoted value followed by / is only self-closing when > follows
        if char == ">":
            self._emit_attribute(self._attr_value)
            self._emit(TokenType.CLOSE_TAG, self._tag_name, self._tag_start)
            self._enter_data()
        else:
            self._attr_value += "/"
            self.state = LexerState.ATTR_VALUE
            self._process_attr_value(char)

    def _process_markup_declaration(self, char: str) -> None:
        self._markup += char
        if self._markup == COMMENT_OPEN:
            self._markup = ""
            self.state = LexerState.COMMENT
        elif self._markup == CDATA_OPEN:
            self._markup = ""
            self._data = []
            self._text_start = self._mark()
            self.state = LexerState.CDATA
        elif not (
            COMMENT_OPEN.startswith(self._markup) or CDATA_OPEN.startswith(self._markup)
        ):
            self._bracket_depth = 0
            self.state = LexerState.DECLARATION
            self._process_declaration(char)

    def _process_comment(self, char: str) -> None:
        self._markup = (self._markup + char)[-len(COMMENT_CLOSE):]
        if self._markup == COMMENT_CLOSE:
            self._enter_data()

    def _process_cdata(self, char: str) -> None:
        self._markup = (self._markup + char)[-len(CDATA_CLOSE):]
        if self._markup == CDATA_CLOSE:
            # The ]] of the terminator is already buffered
            text = "".join(self._data)[:-2]
            self._emit(TokenType.TEXT, text, self._text_start)
            self._enter_data()
        else:
            self._data.append(char)

    def _process_declaration(self, char: str) -> None:
        if char == "[":
            self._bracket_depth += 1
        elif char == "]" and self._bracket_depth > 0:
            self._bracket_depth -= 1
        elif char == ">" and self._bracket_depth == 0:
            self._enter_data()

    def _process_processing_instruction(self, char: str) -> None:
        self._markup = (self._markup + char)[-len(PI_CLOSE):]
        if self._markup == PI_CLOSE:
            self._enter_data()
