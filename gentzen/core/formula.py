"""
Formula AST: Atom, Not, Binary.

A formula is a tree of immutable nodes:
    Atom("P")                         ->  P
    Not(Atom("P"))                    ->  ~P
    Binary("implies", Atom("P"),
           Atom("Q"))                 ->  (P → Q)

Binary nodes always render fully parenthesized, so the rendering is a
canonical key: two trees are the same formula iff their strings match.
Nothing in here knows about tokens, steps, or search.
"""

from dataclasses import dataclass
from typing import Callable, Union


NOT = "not"
AND = "and"
OR = "or"
IMPLIES = "implies"
IFF = "iff"

OPERATORS = (NOT, AND, OR, IMPLIES, IFF)
BINARY_OPERATORS = (AND, OR, IMPLIES, IFF)

SYMBOLS = {
    AND: "∧",
    OR: "∨",
    IMPLIES: "→",
    IFF: "↔",
}
NEGATION_SYMBOL = "~"


@dataclass(frozen=True)
class Atom:
    """An indivisible named proposition."""
    name: str

    def __str__(self):
        return to_string(self)


@dataclass(frozen=True)
class Not:
    """Negation. The operator is fixed; it is kept for uniform inspection."""
    operand: "Formula"
    operator: str = NOT

    def __str__(self):
        return to_string(self)


@dataclass(frozen=True)
class Binary:
    """A binary connective: and, or, implies, iff."""
    operator: str
    left: "Formula"
    right: "Formula"

    def __str__(self):
        return to_string(self)


Formula = Union[Atom, Not, Binary]


# ── Construction ─────────────────────────────────────────────────────────────

def atom(name: str) -> Atom:
    return Atom(name)


def negate(node: Formula) -> Not:
    return Not(node)


def conjunction(left: Formula, right: Formula) -> Binary:
    return Binary(AND, left, right)


def disjunction(left: Formula, right: Formula) -> Binary:
    return Binary(OR, left, right)


def implication(left: Formula, right: Formula) -> Binary:
    return Binary(IMPLIES, left, right)


def equivalence(left: Formula, right: Formula) -> Binary:
    return Binary(IFF, left, right)


# ── Inspection ───────────────────────────────────────────────────────────────

def is_atom(node) -> bool:
    return isinstance(node, Atom)


def is_negation(node) -> bool:
    return isinstance(node, Not)


def is_conjunction(node) -> bool:
    return isinstance(node, Binary) and node.operator == AND


def is_disjunction(node) -> bool:
    return isinstance(node, Binary) and node.operator == OR


def is_implication(node) -> bool:
    return isinstance(node, Binary) and node.operator == IMPLIES


def is_equivalence(node) -> bool:
    return isinstance(node, Binary) and node.operator == IFF


def implication_parts(node):
    """(antecedent, consequent) of an implication, or None."""
    if not is_implication(node):
        return None
    return node.left, node.right


# ── Rendering and normalization ──────────────────────────────────────────────

def to_string(node: Formula) -> str:
    """Canonical rendering: (A ∧ B), (A → B), ~A, name."""
    if isinstance(node, Atom):
        return node.name
    if isinstance(node, Not):
        count = 0
        while isinstance(node, Not):
            count += 1
            node = node.operand
        return NEGATION_SYMBOL * count + to_string(node)
    if isinstance(node, Binary):
        symbol = SYMBOLS.get(node.operator, node.operator)
        return f"({to_string(node.left)} {symbol} {to_string(node.right)})"
    raise TypeError(f"Not a formula node: {node!r}")


def normalize_ast(node: Formula) -> Formula:
    """
    Collapse double negation everywhere: ~~A -> A.

    This is the only simplification the system ever applies. No De Morgan,
    no distribution.
    """
    if isinstance(node, Atom):
        return node
    if isinstance(node, Not):
        # pairs cancel; only the parity of a ~ run survives
        count = 0
        while isinstance(node, Not):
            count += 1
            node = node.operand
        inner = normalize_ast(node)
        return Not(inner) if count % 2 else inner
    if isinstance(node, Binary):
        return Binary(node.operator, normalize_ast(node.left), normalize_ast(node.right))
    raise TypeError(f"Not a formula node: {node!r}")


def get_atoms(node: Formula) -> list:
    """
    Atom names in first-occurrence order, without duplicates.

    Negation does not change an atom's identity: ~P and P both give "P".
    """
    seen = {}

    def collect(n):
        if isinstance(n, Atom):
            seen.setdefault(n.name, None)
        elif isinstance(n, Not):
            collect(n.operand)
        elif isinstance(n, Binary):
            collect(n.left)
            collect(n.right)

    collect(node)
    return list(seen)


def walk_ast(node: Formula, visitor: Callable) -> None:
    """Pre-order traversal: visitor(node) before its children."""
    if node is None:
        return
    visitor(node)
    if isinstance(node, Not):
        walk_ast(node.operand, visitor)
    elif isinstance(node, Binary):
        walk_ast(node.left, visitor)
        walk_ast(node.right, visitor)


def ast_equals(a, b) -> bool:
    """Structural equality. Two missing trees are equal."""
    if a is None or b is None:
        return a is None and b is None
    if type(a) is not type(b):
        return False
    if isinstance(a, Atom):
        return a.name == b.name
    if isinstance(a, Not):
        return ast_equals(a.operand, b.operand)
    return (a.operator == b.operator
            and ast_equals(a.left, b.left)
            and ast_equals(a.right, b.right))


def ast_depth(node) -> int:
    """Maximum nesting level. An atom has depth 1."""
    if isinstance(node, Atom):
        return 1
    if isinstance(node, Not):
        return 1 + ast_depth(node.operand)
    if isinstance(node, Binary):
        return 1 + max(ast_depth(node.left), ast_depth(node.right))
    return 0


def count_nodes(node) -> int:
    if isinstance(node, Atom):
        return 1
    if isinstance(node, Not):
        return 1 + count_nodes(node.operand)
    if isinstance(node, Binary):
        return 1 + count_nodes(node.left) + count_nodes(node.right)
    return 0


def validate_ast(node) -> tuple:
    """
    Check a tree for well-formedness.

    Returns (is_valid, errors) where errors name the offending path,
    e.g. "Missing node at root.left".
    """
    errors = []

    def validate(n, path):
        if n is None:
            errors.append(f"Missing node at {path}")
        elif isinstance(n, Atom):
            if not isinstance(n.name, str) or not n.name:
                errors.append(f"Invalid atom name at {path}")
        elif isinstance(n, Not):
            if n.operator != NOT:
                errors.append(f"Invalid unary operator {n.operator!r} at {path}")
            validate(n.operand, f"{path}.operand")
        elif isinstance(n, Binary):
            if n.operator not in BINARY_OPERATORS:
                errors.append(f"Invalid binary operator {n.operator!r} at {path}")
            validate(n.left, f"{path}.left")
            validate(n.right, f"{path}.right")
        else:
            errors.append(f"Invalid node type {type(n).__name__} at {path}")

    validate(node, "root")
    return not errors, errors
