from .exceptions import (
    GentzenError, FormulaSyntaxError, LexError, ParseError,
    RuleApplicationError, StepArityError, UnknownRuleError, NotAnImplicationError,
    ScenarioError, ResolverDiscoveryError, ConfigError,
)
from .formula import (
    Atom, Not, Binary,
    atom, negate, conjunction, disjunction, implication, equivalence,
    to_string, normalize_ast, get_atoms, walk_ast,
    ast_equals, ast_depth, count_nodes, validate_ast,
)
from .lexer import Token, TokenType, Lexer, tokenize
from .parser import (
    Parser, ParsedFormula,
    parse_formula, parse_formula_string, normalize_formula, formula_atoms,
    canonical_double_neg, validate_formula_syntax, get_parse_info,
)
from .state import DerivationStep, GentzenSystem
from .engine import SearchResult, expand_one_level, search_for_proof
from .proof import find_proof_step, extract_proof, print_proof

__all__ = [
    "GentzenError", "FormulaSyntaxError", "LexError", "ParseError",
    "RuleApplicationError", "StepArityError", "UnknownRuleError", "NotAnImplicationError",
    "ScenarioError", "ResolverDiscoveryError", "ConfigError",
    "Atom", "Not", "Binary",
    "atom", "negate", "conjunction", "disjunction", "implication", "equivalence",
    "to_string", "normalize_ast", "get_atoms", "walk_ast",
    "ast_equals", "ast_depth", "count_nodes", "validate_ast",
    "Token", "TokenType", "Lexer", "tokenize",
    "Parser", "ParsedFormula",
    "parse_formula", "parse_formula_string", "normalize_formula", "formula_atoms",
    "canonical_double_neg", "validate_formula_syntax", "get_parse_info",
    "DerivationStep", "GentzenSystem",
    "SearchResult", "expand_one_level", "search_for_proof",
    "find_proof_step", "extract_proof", "print_proof",
]
