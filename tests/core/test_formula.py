"""Unit tests for formula trees: rendering, inspection, validation."""

import pytest

from gentzen.core.formula import (
    AND, IFF, IMPLIES, OR,
    Atom, Binary, Not,
    atom, conjunction, disjunction, equivalence, implication, negate,
    ast_depth, ast_equals, count_nodes, get_atoms, implication_parts,
    is_atom, is_conjunction, is_disjunction, is_equivalence,
    is_implication, is_negation,
    normalize_ast, to_string, validate_ast, walk_ast,
)


A, B, C = atom("A"), atom("B"), atom("C")


class TestRendering:
    def test_atom(self):
        assert to_string(A) == "A"

    def test_negation(self):
        assert to_string(negate(A)) == "~A"
        assert to_string(negate(negate(A))) == "~~A"

    def test_binary_is_fully_parenthesized(self):
        assert to_string(conjunction(A, B)) == "(A ∧ B)"
        assert to_string(disjunction(A, B)) == "(A ∨ B)"
        assert to_string(implication(A, B)) == "(A → B)"
        assert to_string(equivalence(A, B)) == "(A ↔ B)"

    def test_nested(self):
        tree = implication(conjunction(A, negate(B)), disjunction(B, C))
        assert str(tree) == "((A ∧ ~B) → (B ∨ C))"

    def test_non_node_raises(self):
        with pytest.raises(TypeError):
            to_string("A")


class TestInspection:
    def test_predicates(self):
        assert is_atom(A)
        assert is_negation(negate(A))
        assert is_conjunction(conjunction(A, B))
        assert is_disjunction(disjunction(A, B))
        assert is_implication(implication(A, B))
        assert is_equivalence(equivalence(A, B))
        assert not is_implication(conjunction(A, B))

    def test_implication_parts(self):
        assert implication_parts(implication(A, B)) == (A, B)
        assert implication_parts(A) is None

    def test_get_atoms_dedupes_in_order(self):
        tree = conjunction(disjunction(C, negate(A)), implication(A, C))
        assert get_atoms(tree) == ["C", "A"]

    def test_walk_is_preorder(self):
        seen = []
        walk_ast(conjunction(negate(A), B), lambda n: seen.append(type(n).__name__))
        assert seen == ["Binary", "Not", "Atom", "Atom"]

    def test_depth_and_size(self):
        tree = implication(negate(A), B)
        assert ast_depth(A) == 1
        assert ast_depth(tree) == 3
        assert count_nodes(tree) == 4
        assert ast_depth(None) == 0
        assert count_nodes(None) == 0


class TestEquality:
    def test_structural(self):
        assert ast_equals(conjunction(A, B), Binary(AND, Atom("A"), Atom("B")))
        assert not ast_equals(conjunction(A, B), conjunction(B, A))
        assert not ast_equals(conjunction(A, B), disjunction(A, B))
        assert not ast_equals(A, negate(A))

    def test_missing_trees(self):
        assert ast_equals(None, None)
        assert not ast_equals(A, None)


class TestNormalization:
    def test_double_negation_collapses_everywhere(self):
        tree = Binary(OR, Not(Not(A)), Not(Not(Not(B))))
        assert normalize_ast(tree) == Binary(OR, A, Not(B))

    def test_no_other_rewriting(self):
        tree = Not(Binary(AND, A, B))
        assert normalize_ast(tree) == tree


class TestValidation:
    def test_valid(self):
        assert validate_ast(equivalence(A, negate(B))) == (True, [])

    def test_missing_child(self):
        ok, errors = validate_ast(Binary(IMPLIES, None, A))
        assert not ok
        assert errors == ["Missing node at root.left"]

    def test_bad_operator(self):
        ok, errors = validate_ast(Binary("xor", A, B))
        assert not ok
        assert "xor" in errors[0]

    def test_bad_atom_name(self):
        ok, errors = validate_ast(Not(Atom("")))
        assert errors == ["Invalid atom name at root.operand"]

    def test_foreign_node(self):
        ok, errors = validate_ast(Binary(IFF, A, 42))
        assert not ok
        assert errors == ["Invalid node type int at root.right"]
