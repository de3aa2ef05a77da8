"""
Tokenizer for formula strings.

Every operator spelling is folded to one of five canonical tags while
lexing, so the parser never sees an alias:

    and      ∧  AND  &
    or       ∨  OR   |
    implies  →  IMPLIES  ->  =>
    iff      ↔  IFF  <->  <=>
    not      ~  NOT  !

Symbolic aliases are matched longest-first ("<->" before "->"). Word
aliases are matched as whole identifiers only, so ORDER is an atom and
not OR followed by DER.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import LexError
from .formula import AND, OR, IMPLIES, IFF, NOT


class TokenType:
    IDENTIFIER = "IDENTIFIER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


SYMBOL_OPERATORS = {
    "∧": AND, "&": AND,
    "∨": OR, "|": OR,
    "→": IMPLIES, "->": IMPLIES, "=>": IMPLIES,
    "↔": IFF, "<->": IFF, "<=>": IFF,
    "~": NOT, "!": NOT,
}

WORD_OPERATORS = {
    "AND": AND,
    "OR": OR,
    "IMPLIES": IMPLIES,
    "IFF": IFF,
    "NOT": NOT,
}

OPERATOR_ALIASES = {**SYMBOL_OPERATORS, **WORD_OPERATORS}

# longest first, so "<->" wins over "->" wins over nothing
_SYMBOLS_BY_LENGTH = sorted(SYMBOL_OPERATORS, key=len, reverse=True)


@dataclass(frozen=True)
class Token:
    type: str
    value: Optional[str]
    position: int

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.position})"


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_identifier_char(ch: str) -> bool:
    return _is_letter(ch) or ("0" <= ch <= "9") or ch == "_"


def is_identifier(name) -> bool:
    """True if name lexes as exactly one atom: a letter, then letters, digits or _."""
    return (isinstance(name, str) and name != "" and _is_letter(name[0])
            and all(_is_identifier_char(ch) for ch in name)
            and name not in WORD_OPERATORS)


class Lexer:
    """Single-pass scanner. Positions index into the input string."""

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def _match_symbol(self) -> Optional[str]:
        for symbol in _SYMBOLS_BY_LENGTH:
            if self.text.startswith(symbol, self.position):
                return symbol
        return None

    def _read_identifier(self) -> Token:
        start = self.position
        if not _is_letter(self.text[start]):
            raise LexError(
                f"Invalid identifier start character {self.text[start]!r}", start)
        end = start
        while end < len(self.text) and _is_identifier_char(self.text[end]):
            end += 1
        self.position = end
        word = self.text[start:end]
        if word in WORD_OPERATORS:
            return Token(TokenType.OPERATOR, WORD_OPERATORS[word], start)
        return Token(TokenType.IDENTIFIER, word, start)

    def next_token(self) -> Token:
        text = self.text
        while self.position < len(text) and text[self.position].isspace():
            self.position += 1

        if self.position >= len(text):
            return Token(TokenType.EOF, None, self.position)

        ch = text[self.position]
        start = self.position

        if ch == "(":
            self.position += 1
            return Token(TokenType.LPAREN, "(", start)
        if ch == ")":
            self.position += 1
            return Token(TokenType.RPAREN, ")", start)

        symbol = self._match_symbol()
        if symbol is not None:
            self.position += len(symbol)
            return Token(TokenType.OPERATOR, SYMBOL_OPERATORS[symbol], start)

        if _is_identifier_char(ch):
            return self._read_identifier()

        raise LexError(f"Unexpected character {ch!r}", start)

    def tokenize(self) -> list:
        """All tokens, ending with exactly one EOF token."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens


def tokenize(text: str) -> list:
    return Lexer(text).tokenize()


def canonical_operator(alias: str) -> str:
    """Canonical tag for an operator spelling; unknown spellings pass through."""
    return OPERATOR_ALIASES.get(alias, alias)


def is_operator(text: str) -> bool:
    return text in OPERATOR_ALIASES
