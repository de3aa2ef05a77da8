"""
Recursive-descent parser for propositional formulas.

Grammar, lowest precedence first:

    formula     := iff
    iff         := implication ( IFF implication )*           left-assoc
    implication := disjunction ( IMPLIES implication )?       right-assoc
    disjunction := conjunction ( OR conjunction )*            left-assoc
    conjunction := negation ( AND negation )*                 left-assoc
    negation    := NOT* primary
    primary     := IDENTIFIER | '(' formula ')'

So  A ∧ B ∨ C   is  ((A ∧ B) ∨ C)
    A ∨ B → C   is  ((A ∨ B) → C)
    A → B → C   is  (A → (B → C))

parse_formula() normalizes the tree (~~A -> A) exactly once; the result's
str() is the canonical formula string used everywhere as a key.
"""

from dataclasses import dataclass
from functools import lru_cache

from .exceptions import FormulaSyntaxError, ParseError
from .formula import (
    Formula, atom, negate,
    conjunction, disjunction, implication, equivalence,
    AND, OR, IMPLIES, IFF, NOT,
    get_atoms, normalize_ast, to_string,
)
from .lexer import Token, TokenType, tokenize


class Parser:
    """Precedence-climbing parser over a token list ending in EOF."""

    def __init__(self, tokens: list):
        self.tokens = tokens
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.current
        if token.type != TokenType.EOF:
            self.index += 1
        return token

    def _at_operator(self, operator: str) -> bool:
        token = self.current
        return token.type == TokenType.OPERATOR and token.value == operator

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        return repr(token.value)

    def parse(self) -> Formula:
        node = self.parse_equivalence()
        if self.current.type != TokenType.EOF:
            raise ParseError(
                f"Unexpected token {self._describe(self.current)} after complete formula",
                self.current.position, self.current,
            )
        return node

    def parse_equivalence(self) -> Formula:
        left = self.parse_implication()
        while self._at_operator(IFF):
            self._advance()
            left = equivalence(left, self.parse_implication())
        return left

    def parse_implication(self) -> Formula:
        left = self.parse_disjunction()
        if self._at_operator(IMPLIES):
            self._advance()
            return implication(left, self.parse_implication())
        return left

    def parse_disjunction(self) -> Formula:
        left = self.parse_conjunction()
        while self._at_operator(OR):
            self._advance()
            left = disjunction(left, self.parse_conjunction())
        return left

    def parse_conjunction(self) -> Formula:
        left = self.parse_negation()
        while self._at_operator(AND):
            self._advance()
            left = conjunction(left, self.parse_negation())
        return left

    def parse_negation(self) -> Formula:
        count = 0
        while self._at_operator(NOT):
            self._advance()
            count += 1
        node = self.parse_primary()
        for _ in range(count):
            node = negate(node)
        return node

    def parse_primary(self) -> Formula:
        token = self.current
        if token.type == TokenType.LPAREN:
            self._advance()
            node = self.parse_equivalence()
            if self.current.type != TokenType.RPAREN:
                raise ParseError(
                    f"Expected ')' but found {self._describe(self.current)}",
                    self.current.position, self.current,
                )
            self._advance()
            return node
        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return atom(token.value)
        raise ParseError(
            f"Expected identifier or '(' but found {self._describe(token)}",
            token.position, token,
        )


@dataclass(frozen=True)
class ParsedFormula:
    """A parsed, normalized formula. str() gives the canonical string."""
    raw: str
    ast: Formula
    canonical: str

    @property
    def atoms(self) -> list:
        return get_atoms(self.ast)

    def __str__(self):
        return self.canonical


def _parse_tokens(tokens: list) -> Formula:
    parser = Parser(tokens)
    try:
        return parser.parse()
    except RecursionError:
        raise ParseError("Formula nests too deeply", parser.current.position) from None


def parse_formula_string(text: str) -> Formula:
    """Parse without normalizing. Raises FormulaSyntaxError."""
    return _parse_tokens(tokenize(text))


def parse_formula(text: str) -> ParsedFormula:
    """Parse and collapse double negations."""
    tree = parse_formula_string(text)
    try:
        ast = normalize_ast(tree)
        canonical = to_string(ast)
    except RecursionError:
        raise ParseError("Formula nests too deeply", len(text)) from None
    return ParsedFormula(raw=text, ast=ast, canonical=canonical)


@lru_cache(maxsize=4096)
def normalize_formula(text: str) -> str:
    """Canonical string of a formula string. Memoized: strings are values."""
    return parse_formula(text).canonical


def formula_atoms(text: str) -> list:
    return parse_formula(text).atoms


def canonical_double_neg(text: str) -> str:
    """
    Strip every leading "~~" pair without parsing.

    Cheap comparison key for signatures and novelty checks; never used to
    rewrite a stored formula.
    """
    while text.startswith("~~"):
        text = text[2:]
    return text


def validate_formula_syntax(text: str) -> tuple:
    """(is_valid, errors) without raising."""
    try:
        parse_formula_string(text)
    except FormulaSyntaxError as e:
        return False, [str(e)]
    return True, []


def get_parse_info(text: str) -> dict:
    """Tokens, tree and errors for one formula string, for diagnostics."""
    try:
        tokens = tokenize(text)
        tree = _parse_tokens(tokens)
    except FormulaSyntaxError as e:
        return {"success": False, "tokens": [], "ast": None,
                "errors": [str(e)], "position": e.position}
    return {
        "success": True,
        "tokens": [t for t in tokens if t.type != TokenType.EOF],
        "ast": tree,
        "errors": [],
        "position": None,
    }
