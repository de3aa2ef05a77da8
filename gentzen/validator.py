"""
Static checks for scenario files, run before anything is resolved.

Errors make a scenario invalid; warnings are style hints. Validation never
raises: an unreadable file is reported as a single error.
"""

import logging
import re
from dataclasses import dataclass, field

from .core.exceptions import ScenarioError
from .core.parser import validate_formula_syntax
from .scenario import read_scenario

logger = logging.getLogger(__name__)

_PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
_COMPOUND = re.compile(r"[∧∨→↔&|]|->|<->|<=>|=>|\bAND\b|\bOR\b|\bIMPLIES\b|\bIFF\b")


@dataclass
class ValidationResult:
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        return f"{len(self.errors)} errors, {len(self.warnings)} warnings"


def _parens_balanced(formula: str) -> bool:
    depth = 0
    for ch in formula:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _check_formula(formula, result: ValidationResult):
    if not isinstance(formula, str):
        return
    if not _parens_balanced(formula):
        result.errors.append(f"Formula {formula!r} has unbalanced parentheses")
        return
    valid, errors = validate_formula_syntax(formula)
    if not valid:
        result.errors.append(f"Formula {formula!r} is malformed: {errors[0]}")
        return
    if _COMPOUND.search(formula) and "(" not in formula:
        result.warnings.append(
            f"Formula {formula!r} may need parentheses around compound expressions")


def validate_scenario_data(data: dict) -> ValidationResult:
    result = ValidationResult()

    targets = data.get("targets")
    if not isinstance(targets, list) or not targets:
        result.errors.append('Missing required "targets" field or targets array is empty')
        targets = targets if isinstance(targets, list) else []
    for i, target in enumerate(targets):
        if not isinstance(target, str) or not target:
            result.errors.append(f"Target {i} is not a valid string")

    steps = data.get("steps")
    step_formulas = []
    if steps is not None:
        if not isinstance(steps, list):
            result.errors.append("Steps must be an array")
        else:
            for i, step in enumerate(steps):
                if not isinstance(step, dict):
                    result.errors.append(f"Step {i} must be a mapping")
                    continue
                if not step.get("rule"):
                    result.errors.append(f'Step {i} missing "rule" field')
                sources = step.get("from")
                if not isinstance(sources, list):
                    result.errors.append(f'Step {i} missing "from" array')
                else:
                    step_formulas.extend(sources)

    propositions = data.get("propositions")
    if propositions is not None:
        if not isinstance(propositions, list):
            result.errors.append("Propositions must be an array")
        else:
            seen = set()
            for i, name in enumerate(propositions):
                if not isinstance(name, str):
                    result.errors.append(f"Proposition {i} must be a string")
                    continue
                if name in seen:
                    result.errors.append(f"Duplicate proposition name: {name}")
                seen.add(name)
                if not _PASCAL_CASE.match(name):
                    result.warnings.append(f"Proposition {name!r} should use PascalCase naming")

    for formula in list(targets) + step_formulas:
        _check_formula(formula, result)

    return result


def validate_scenario(path) -> ValidationResult:
    try:
        data = read_scenario(path)
    except ScenarioError as e:
        return ValidationResult(errors=[f"Failed to parse scenario file: {e}"])
    return validate_scenario_data(data)


def validate_and_report(path, verbose: bool = False) -> ValidationResult:
    """Validate and log every finding."""
    if verbose:
        logger.info("Validating %s", path)
    result = validate_scenario(path)
    for error in result.errors:
        logger.error("  %s", error)
    for warning in result.warnings:
        logger.warning("  %s", warning)
    if result.is_valid:
        logger.info("Scenario validation passed (%s)", result.summary)
    else:
        logger.error("Scenario validation failed (%s)", result.summary)
    return result
