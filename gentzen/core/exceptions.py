"""
Exception hierarchy.

Two families matter to the engine:
    - FormulaSyntaxError: malformed input. Fatal to one parse, carries
      the character position where lexing or parsing gave up.
    - RuleApplicationError: a rule could not be applied to the steps it
      was handed. Recoverable; the search drops the candidate and the
      scenario loader skips the step.

"Not provable" is never an exception. It is a SearchResult.
"""

from typing import Optional


class GentzenError(Exception):
    """Base exception for all gentzen errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.context = context or {}


# ── Malformed input ──────────────────────────────────────────────────────────

class FormulaSyntaxError(GentzenError):
    """A formula string could not be tokenized or parsed."""

    def __init__(self, message: str, position: int, context: Optional[dict] = None):
        super().__init__(f"{message} at position {position}", context)
        self.reason = message
        self.position = position


class LexError(FormulaSyntaxError):
    """Unexpected character in a formula string."""


class ParseError(FormulaSyntaxError):
    """Unbalanced parentheses, missing operand, or trailing tokens."""

    def __init__(self, message: str, position: int, token=None):
        super().__init__(message, position, {"token": token})
        self.token = token


# ── Rule application ─────────────────────────────────────────────────────────

class RuleApplicationError(GentzenError):
    """A rule could not be applied to the given steps."""


class StepArityError(RuleApplicationError):
    """A step handed to a rule does not hold exactly one formula."""

    def __init__(self, formula_count: int):
        super().__init__(
            f"Step must contain exactly one formula, found {formula_count}",
            {"formula_count": formula_count},
        )
        self.formula_count = formula_count


class UnknownRuleError(RuleApplicationError):
    """Unknown rule name, or unknown subtype for a known rule."""

    def __init__(self, rule: str, subtype: Optional[str] = None):
        if subtype is None:
            message = f"Unknown rule {rule!r}"
        else:
            message = f"Unknown subtype {subtype!r} for rule {rule!r}"
        super().__init__(message, {"rule": rule, "subtype": subtype})
        self.rule = rule
        self.subtype = subtype


class NotAnImplicationError(RuleApplicationError):
    """Contraposition was asked of a formula that is not A -> B."""

    def __init__(self, formula: str):
        super().__init__(
            f"Formula {formula!r} is not an implication; "
            "contraposition requires an implication",
            {"formula": formula},
        )
        self.formula = formula


# ── Collaborators ────────────────────────────────────────────────────────────

class ScenarioError(GentzenError):
    """A scenario file is unreadable or not a YAML mapping."""


class ResolverDiscoveryError(GentzenError):
    """Resolver discovery was asked to scan nothing or an unreadable path."""


class ConfigError(GentzenError):
    """A configuration value is out of range or of the wrong type."""

    def __init__(self, message: str, key: str):
        super().__init__(message, {"key": key})
        self.key = key
