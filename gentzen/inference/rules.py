"""
The five natural-deduction rules.

Each rule takes one or two existing steps, builds one new formula, and
appends one new step to the system:

    alpha/and          A, B   ->  (A ∧ B)
    alpha/implies      A, B   ->  (A → B)
    beta               A, B   ->  (A ∨ B)
    equivalence        A, B   ->  (A ↔ B)
    contraposition     (A → B) -> (~B → ~A)
    doubleNegation/introduction    A  ->  ~~A   (unless already ~~A)
    doubleNegation/elimination   ~~A  ->  A     (else unchanged)

The binary rules compose the two input strings textually; contraposition
is the only one that needs to parse.

There is no modus ponens. From A and (A → B) nothing here produces B.
"""

from enum import Enum
from typing import Optional

from ..core.exceptions import (
    NotAnImplicationError, RuleApplicationError, StepArityError, UnknownRuleError,
)
from ..core.formula import (
    AND, OR, IMPLIES, IFF, SYMBOLS,
    implication, implication_parts, negate, to_string,
)
from ..core.parser import parse_formula
from ..core.state import DerivationStep, GentzenSystem


class Rule(Enum):
    ALPHA = "alpha"
    BETA = "beta"
    CONTRAPOSITION = "contraposition"
    DOUBLE_NEGATION = "doubleNegation"
    EQUIVALENCE = "equivalence"

    @property
    def arity(self) -> int:
        return 1 if self in (Rule.CONTRAPOSITION, Rule.DOUBLE_NEGATION) else 2

    @property
    def subtypes(self) -> tuple:
        return _SUBTYPES.get(self, ())

    @property
    def default_subtype(self) -> Optional[str]:
        return self.subtypes[0] if self.subtypes else None


_SUBTYPES = {
    Rule.ALPHA: ("and", "implies"),
    Rule.DOUBLE_NEGATION: ("introduction", "elimination"),
}

# One expansion round tries every one of these, in this order.
BINARY_CANDIDATES = (
    (Rule.ALPHA, "and"),
    (Rule.ALPHA, "implies"),
    (Rule.BETA, None),
    (Rule.EQUIVALENCE, None),
)
UNARY_CANDIDATES = (
    (Rule.CONTRAPOSITION, None),
    (Rule.DOUBLE_NEGATION, "introduction"),
    (Rule.DOUBLE_NEGATION, "elimination"),
)


def parse_rule(name: str) -> Rule:
    """Rule from its scenario-file name."""
    try:
        return Rule(name)
    except ValueError:
        raise UnknownRuleError(str(name)) from None


def unique_formula(step: DerivationStep) -> str:
    if len(step.formulas) != 1:
        raise StepArityError(len(step.formulas))
    return next(iter(step.formulas))


def _compose(system, provenance, subtype, step1, step2, operator) -> DerivationStep:
    a = unique_formula(step1)
    b = unique_formula(step2)
    return system.append_step(
        provenance, subtype,
        (system.lineage_ref(step1), system.lineage_ref(step2)),
        f"({a} {SYMBOLS[operator]} {b})",
    )


# ── The rules ────────────────────────────────────────────────────────────────

def alpha_rule(system: GentzenSystem, step1: DerivationStep, step2: DerivationStep,
               subtype: str = "and") -> DerivationStep:
    if subtype == "and":
        return _compose(system, "AlphaRule", "and", step1, step2, AND)
    if subtype == "implies":
        return _compose(system, "AlphaRule", "implies", step1, step2, IMPLIES)
    raise UnknownRuleError(Rule.ALPHA.value, subtype)


def beta_rule(system: GentzenSystem, step1: DerivationStep,
              step2: DerivationStep) -> DerivationStep:
    return _compose(system, "BetaRule", "or", step1, step2, OR)


def equivalence_rule(system: GentzenSystem, step1: DerivationStep,
                     step2: DerivationStep) -> DerivationStep:
    return _compose(system, "EquivalenceRule", "equiv", step1, step2, IFF)


def contraposition_rule(system: GentzenSystem, step: DerivationStep) -> DerivationStep:
    formula = unique_formula(step)
    parts = implication_parts(parse_formula(formula).ast)
    if parts is None:
        raise NotAnImplicationError(formula)
    antecedent, consequent = parts
    contrapositive = implication(negate(consequent), negate(antecedent))
    return system.append_step(
        "ContrapositionRule", "contraposition",
        (system.lineage_ref(step),), to_string(contrapositive),
    )


def double_negation_rule(system: GentzenSystem, step: DerivationStep,
                         mode: str = "introduction") -> DerivationStep:
    formula = unique_formula(step)
    if mode == "introduction":
        result = formula if formula.startswith("~~") else f"~~{formula}"
        subtype = "doubleNegIntro"
    elif mode == "elimination":
        result = formula[2:] if formula.startswith("~~") else formula
        subtype = "doubleNegElim"
    else:
        raise UnknownRuleError(Rule.DOUBLE_NEGATION.value, mode)
    return system.append_step(
        "DoubleNegationRule", subtype, (system.lineage_ref(step),), result,
    )


# ── Dispatch ─────────────────────────────────────────────────────────────────

def _apply_alpha(system, steps, subtype):
    return alpha_rule(system, steps[0], steps[1], subtype or "and")


def _apply_beta(system, steps, subtype):
    return beta_rule(system, steps[0], steps[1])


def _apply_contraposition(system, steps, subtype):
    return contraposition_rule(system, steps[0])


def _apply_double_negation(system, steps, subtype):
    return double_negation_rule(system, steps[0], subtype or "introduction")


def _apply_equivalence(system, steps, subtype):
    return equivalence_rule(system, steps[0], steps[1])


_APPLY = {
    Rule.ALPHA: _apply_alpha,
    Rule.BETA: _apply_beta,
    Rule.CONTRAPOSITION: _apply_contraposition,
    Rule.DOUBLE_NEGATION: _apply_double_negation,
    Rule.EQUIVALENCE: _apply_equivalence,
}

if set(_APPLY) != set(Rule):
    raise RuntimeError(f"rules without a handler: {set(Rule) - set(_APPLY)}")


def apply_rule(system: GentzenSystem, rule: Rule, steps: list,
               subtype: Optional[str] = None) -> DerivationStep:
    """
    Apply one rule to one or two steps and return the appended step.

    Raises RuleApplicationError (or a subclass) when the step count is
    wrong for the rule, a step does not hold exactly one formula, the
    subtype is unknown, or contraposition meets a non-implication.
    """
    if len(steps) != rule.arity:
        raise RuleApplicationError(
            f"Rule {rule.value!r} takes {rule.arity} step(s), got {len(steps)}",
            {"rule": rule.value, "given": len(steps)},
        )
    return _APPLY[rule](system, steps, subtype)
