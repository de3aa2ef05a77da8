"""
Gentzen: natural-deduction proofs over resolved facts.

Replace ad-hoc boolean guards with derivations you can audit. Facts come
from resolvers; a scenario combines them with five rules (alpha, beta,
contraposition, double negation, equivalence); a bounded breadth-first
search decides whether each target formula is reachable.

Usage:
    python -m gentzen scenario.yaml --resolvers ./resolvers
    python -m gentzen scenario.yaml --fact CustomerIsVIP=true --verbose
"""

from .core.exceptions import (
    GentzenError, FormulaSyntaxError, LexError, ParseError,
    RuleApplicationError, StepArityError, UnknownRuleError, NotAnImplicationError,
    ScenarioError, ResolverDiscoveryError, ConfigError,
)
from .core.formula import Atom, Not, Binary, get_atoms, normalize_ast, to_string
from .core.parser import parse_formula, normalize_formula, validate_formula_syntax
from .core.state import DerivationStep, GentzenSystem
from .core.engine import SearchResult, expand_one_level, search_for_proof
from .core.proof import extract_proof, print_proof
from .inference.rules import (
    Rule, apply_rule,
    alpha_rule, beta_rule, contraposition_rule,
    double_negation_rule, equivalence_rule,
)
from .config import GentzenConfig, ReasoningConfig
from .scenario import Scenario, load_scenario
from .resolvers import discover_resolvers, run_fact_resolvers
from .validator import ValidationResult, validate_scenario
from .reasoning import run_gentzen_reasoning
from .visualization import display_results, export_dot

__version__ = "0.1.0"

__all__ = [
    "GentzenError", "FormulaSyntaxError", "LexError", "ParseError",
    "RuleApplicationError", "StepArityError", "UnknownRuleError", "NotAnImplicationError",
    "ScenarioError", "ResolverDiscoveryError", "ConfigError",
    "Atom", "Not", "Binary", "get_atoms", "normalize_ast", "to_string",
    "parse_formula", "normalize_formula", "validate_formula_syntax",
    "DerivationStep", "GentzenSystem",
    "SearchResult", "expand_one_level", "search_for_proof",
    "extract_proof", "print_proof",
    "Rule", "apply_rule",
    "alpha_rule", "beta_rule", "contraposition_rule",
    "double_negation_rule", "equivalence_rule",
    "GentzenConfig", "ReasoningConfig",
    "Scenario", "load_scenario",
    "discover_resolvers", "run_fact_resolvers",
    "ValidationResult", "validate_scenario",
    "run_gentzen_reasoning",
    "display_results", "export_dot",
]
