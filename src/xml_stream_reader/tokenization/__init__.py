"""Tokenization layer for streaming XML reading.

Key Components:
    XMLLexer: Chunk-resumable state machine turning markup into tokens
    Token: A structural token with kind, value and position
    TokenType: The five token kinds consumed by the tree assembler
    TokenPosition: Line, column and offset of a token
    LexerState: State machine states of the lexer
"""

from .tokenizer import (
    LexerState,
    Token,
    TokenPosition,
    TokenSink,
    TokenType,
    XMLLexer,
)

__all__ = [
    "LexerState",
    "Token",
    "TokenPosition",
    "TokenSink",
    "TokenType",
    "XMLLexer",
]
