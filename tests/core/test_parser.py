"""
Unit and property tests for the formula parser.

Core claims:
    - Precedence: ~ > ∧ > ∨ > → > ↔; → is right-associative
    - Rendering is canonical: parse(str(parse(s))) == parse(s)
    - Double negation collapses: ~~~~X is X, ~~~X is ~X
    - Malformed input raises FormulaSyntaxError with a position
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gentzen.core.exceptions import FormulaSyntaxError, LexError, ParseError
from gentzen.core.formula import (
    Atom, Binary, Not, BINARY_OPERATORS, AND, IMPLIES, normalize_ast, to_string,
)
from gentzen.core.lexer import OPERATOR_ALIASES, WORD_OPERATORS
from gentzen.core.parser import (
    canonical_double_neg, formula_atoms, get_parse_info,
    normalize_formula, parse_formula, parse_formula_string,
    validate_formula_syntax,
)


def canon(text):
    return str(parse_formula(text))


# ── Unit tests ──────────────────────────────────────────────────────────────

class TestPrecedence:
    @pytest.mark.parametrize("text,expected", [
        ("A ∧ B ∨ C", "((A ∧ B) ∨ C)"),
        ("A ∨ B → C", "((A ∨ B) → C)"),
        ("A → B → C", "(A → (B → C))"),
        ("A ∨ B ∨ C", "((A ∨ B) ∨ C)"),
        ("A ∧ B ∧ C", "((A ∧ B) ∧ C)"),
        ("A ↔ B ↔ C", "((A ↔ B) ↔ C)"),
        ("A ↔ B → C", "(A ↔ (B → C))"),
        ("~A ∧ B", "(~A ∧ B)"),
        ("~(A ∧ B)", "~(A ∧ B)"),
        ("A ∧ (B ∨ C)", "(A ∧ (B ∨ C))"),
        ("(A → B) → C", "((A → B) → C)"),
    ])
    def test_grouping(self, text, expected):
        assert canon(text) == expected

    def test_word_and_ascii_aliases(self):
        assert canon("A AND B OR C") == "((A ∧ B) ∨ C)"
        assert canon("A & B -> C | D") == "((A ∧ B) → (C ∨ D))"
        assert canon("A <=> NOT B") == "(A ↔ ~B)"

    def test_redundant_parentheses(self):
        assert canon("((((A))))") == "A"

    def test_atom_named_like_keyword_prefix(self):
        assert canon("ORDER ∧ ANDY") == "(ORDER ∧ ANDY)"


class TestDoubleNegation:
    @pytest.mark.parametrize("text,expected", [
        ("~~X", "X"),
        ("~~~X", "~X"),
        ("~~~~X", "X"),
        ("NOT NOT A", "A"),
        ("!!!A", "~A"),
        ("~~(A ∧ ~~B)", "(A ∧ B)"),
    ])
    def test_collapse(self, text, expected):
        assert canon(text) == expected

    def test_parse_formula_string_does_not_normalize(self):
        tree = parse_formula_string("~~A")
        assert tree == Not(Not(Atom("A")))

    def test_normalize_formula(self):
        assert normalize_formula("~~(P -> Q)") == "(P → Q)"

    def test_canonical_double_neg_strips_only_leading_pairs(self):
        assert canonical_double_neg("~~~~A") == "A"
        assert canonical_double_neg("~~~A") == "~A"
        assert canonical_double_neg("(~~A ∧ B)") == "(~~A ∧ B)"

    @pytest.mark.parametrize("count,expected", [(3000, "A"), (3001, "~A")])
    def test_long_tilde_run_keeps_parity(self, count, expected):
        assert canon("~" * count + "A") == expected
        assert canon("~" * count + "(A ∧ B)") == expected.replace("A", "(A ∧ B)")

    def test_long_tilde_run_parses_without_normalizing(self):
        tree = parse_formula_string("~" * 3000 + "A")
        assert to_string(tree) == "~" * 3000 + "A"


class TestParsedFormula:
    def test_fields(self):
        parsed = parse_formula("A -> B")
        assert parsed.raw == "A -> B"
        assert parsed.ast == Binary(IMPLIES, Atom("A"), Atom("B"))
        assert parsed.canonical == "(A → B)"

    def test_atoms_in_first_occurrence_order(self):
        assert parse_formula("(B ∧ ~A) ∨ B").atoms == ["B", "A"]
        assert formula_atoms("~X") == ["X"]


class TestParseErrors:
    def test_unclosed_paren(self):
        with pytest.raises(ParseError) as exc:
            parse_formula("(A ∧ B")
        assert exc.value.position == 6
        assert "')'" in str(exc.value)

    def test_missing_operand(self):
        with pytest.raises(ParseError) as exc:
            parse_formula("A ∧")
        assert exc.value.position == 3
        assert "end of input" in str(exc.value)

    def test_trailing_token(self):
        with pytest.raises(ParseError) as exc:
            parse_formula("A B")
        assert exc.value.position == 2

    def test_stray_close_paren(self):
        with pytest.raises(ParseError) as exc:
            parse_formula("A)")
        assert exc.value.position == 1

    def test_empty_string(self):
        with pytest.raises(ParseError) as exc:
            parse_formula("")
        assert exc.value.position == 0

    def test_empty_parens(self):
        with pytest.raises(ParseError):
            parse_formula("()")

    def test_lex_errors_surface_as_syntax_errors(self):
        with pytest.raises(FormulaSyntaxError):
            parse_formula("A ∧ $")
        with pytest.raises(LexError):
            parse_formula("A ∧ $")

    def test_message_carries_position(self):
        with pytest.raises(FormulaSyntaxError) as exc:
            parse_formula("A ∧")
        assert str(exc.value).endswith("at position 3")


class TestDiagnostics:
    def test_validate_formula_syntax(self):
        assert validate_formula_syntax("(A ∧ B)") == (True, [])
        ok, errors = validate_formula_syntax("(A ∧ B")
        assert not ok
        assert len(errors) == 1

    def test_parse_info_success(self):
        info = get_parse_info("A ∧ B")
        assert info["success"]
        assert [t.value for t in info["tokens"]] == ["A", "and", "B"]
        assert info["ast"] == Binary(AND, Atom("A"), Atom("B"))
        assert info["position"] is None

    def test_parse_info_failure(self):
        info = get_parse_info("A ∧")
        assert not info["success"]
        assert info["ast"] is None
        assert info["position"] == 3

    def test_deep_nesting_is_a_syntax_error(self):
        text = "(" * 3000 + "A" + ")" * 3000
        with pytest.raises(ParseError) as exc:
            parse_formula(text)
        assert "nests too deeply" in str(exc.value)
        ok, errors = validate_formula_syntax(text)
        assert not ok
        assert "nests too deeply" in errors[0]
        assert not get_parse_info(text)["success"]


# ── Hypothesis generators ───────────────────────────────────────────────────

atom_names = st.from_regex(r"[A-Za-z][A-Za-z0-9_]{0,5}", fullmatch=True).filter(
    lambda s: s not in WORD_OPERATORS)


def formula_trees(max_leaves=8):
    return st.recursive(
        st.builds(Atom, atom_names),
        lambda children: st.one_of(
            st.builds(Not, children),
            st.builds(Binary, st.sampled_from(BINARY_OPERATORS), children, children),
        ),
        max_leaves=max_leaves,
    )


SPELLINGS = {}
for _alias, _tag in OPERATOR_ALIASES.items():
    SPELLINGS.setdefault(_tag, []).append(_alias)


@st.composite
def spelled(draw, tree):
    """Render a tree with randomly chosen operator spellings."""
    if isinstance(tree, Atom):
        return tree.name
    if isinstance(tree, Not):
        alias = draw(st.sampled_from(SPELLINGS["not"]))
        return f"{alias} {draw(spelled(tree.operand))}"
    alias = draw(st.sampled_from(SPELLINGS[tree.operator]))
    left = draw(spelled(tree.left))
    right = draw(spelled(tree.right))
    return f"({left} {alias} {right})"


# ── Property tests ──────────────────────────────────────────────────────────

class TestProperties:
    @given(formula_trees())
    @settings(max_examples=200)
    def test_render_then_parse_is_normalized_tree(self, tree):
        assert parse_formula(to_string(tree)).ast == normalize_ast(tree)

    @given(formula_trees())
    @settings(max_examples=200)
    def test_canonical_string_is_a_fixed_point(self, tree):
        once = canon(to_string(tree))
        assert canon(once) == once

    @given(st.data())
    @settings(max_examples=150)
    def test_alias_spelling_does_not_matter(self, data):
        tree = data.draw(formula_trees())
        text = data.draw(spelled(tree))
        assert canon(text) == to_string(normalize_ast(tree))

    @given(formula_trees())
    def test_atoms_are_never_negated(self, tree):
        for name in parse_formula(to_string(tree)).atoms:
            assert not name.startswith("~")

    @given(atom_names, st.integers(min_value=0, max_value=8))
    def test_negation_parity(self, name, n):
        expected = name if n % 2 == 0 else f"~{name}"
        assert canon("~" * n + name) == expected
