from .rules import (
    Rule, BINARY_CANDIDATES, UNARY_CANDIDATES,
    parse_rule, unique_formula, apply_rule,
    alpha_rule, beta_rule, contraposition_rule,
    double_negation_rule, equivalence_rule,
)

__all__ = [
    "Rule", "BINARY_CANDIDATES", "UNARY_CANDIDATES",
    "parse_rule", "unique_formula", "apply_rule",
    "alpha_rule", "beta_rule", "contraposition_rule",
    "double_negation_rule", "equivalence_rule",
]
