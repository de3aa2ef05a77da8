"""
Scenario files: YAML descriptions of what to derive.

    propositions:
      - ProcessOrder
    steps:
      - rule: alpha
        subtype: and
        from: [CustomerIsVIP, PaymentProcessed]
      - rule: alpha
        subtype: implies
        from: ["(CustomerIsVIP ∧ PaymentProcessed)", ProcessOrder]
    targets:
      - "(CustomerIsVIP ∧ PaymentProcessed)"

Facts are not in the file. They arrive as an already-resolved
{name: bool} map; a False resolver contributes "~Name" (auto-negation).

Steps are applied in order. A step whose inputs mention atoms that were
never resolved either way is recorded in skipped_steps instead of being
applied. A step whose rule fails is logged and recorded there too, with
the error message instead of missing facts.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .core.exceptions import RuleApplicationError, ScenarioError, UnknownRuleError
from .core.parser import formula_atoms
from .core.state import GentzenSystem
from .inference.rules import apply_rule, parse_rule

logger = logging.getLogger(__name__)


@dataclass
class Scenario:
    system: GentzenSystem
    targets: list = field(default_factory=list)
    propositions: list = field(default_factory=list)
    referenced_atoms: set = field(default_factory=set)


def read_scenario(path) -> dict:
    """Parse a scenario file into a dict. An empty file is an empty scenario."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ScenarioError(f"Cannot read scenario {path}: {e}", {"path": str(path)}) from e
    except yaml.YAMLError as e:
        raise ScenarioError(f"Invalid YAML in scenario {path}: {e}", {"path": str(path)}) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScenarioError(
            f"Scenario {path} must be a mapping, got {type(data).__name__}",
            {"path": str(path)},
        )
    return data


def _formula_list(value, where: str) -> list:
    """The entries of a formula list, or ScenarioError naming the bad one."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ScenarioError(f"{where} must be a list, got {type(value).__name__}",
                            {"entry": where})
    for i, formula in enumerate(value):
        # unquoted On, Yes, 42 reach here as bool or int
        if not isinstance(formula, str):
            raise ScenarioError(
                f"{where}[{i}] is {formula!r}, not a formula string; quote it in the YAML",
                {"entry": f"{where}[{i}]", "value": formula},
            )
    return value


def collect_referenced_atoms(data: dict) -> set:
    """
    Propositions plus every atom mentioned by step inputs and targets.

    Raises ScenarioError if any of them is not a string.
    """
    atoms = set(_formula_list(data.get("propositions"), "propositions"))
    for number, step in enumerate(data.get("steps") or [], start=1):
        sources = step.get("from") if isinstance(step, dict) else None
        if isinstance(sources, list):
            for formula in _formula_list(sources, f"step #{number} from"):
                atoms.update(formula_atoms(formula))
    for target in _formula_list(data.get("targets"), "targets"):
        atoms.update(formula_atoms(target))
    return atoms


def facts_from_resolutions(fact_map: dict) -> list:
    """
    Resolver results to fact strings.

        {"A": True}    -> ["A"]
        {"B": False}   -> ["~B"]
        {"~C": False}  -> []       already negated; nothing to synthesize
    """
    facts = []
    for name, resolved in fact_map.items():
        if resolved:
            facts.append(name)
        elif not name.startswith("~"):
            facts.append(f"~{name}")
    return facts


def apply_scenario_steps(system: GentzenSystem, steps: list,
                         log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    for number, entry in enumerate(steps, start=1):
        if not isinstance(entry, dict):
            log.warning("Step #%d is not a mapping. Skipping.", number)
            continue
        rule_name = entry.get("rule")
        subtype = entry.get("subtype")
        sources = entry.get("from")
        if not isinstance(sources, list):
            continue
        _formula_list(sources, f"step #{number} from")

        inputs = []
        missing = []
        for formula in sources:
            if formula in system.facts:
                inputs.append(system.fact_reference(formula))
                continue
            found = system.find_steps_containing(formula)
            if found:
                inputs.append(found[0])
                continue
            resolvable, unresolved = system.can_resolve_formula(formula)
            if not resolvable:
                missing.extend(unresolved)
            else:
                log.debug("Step #%d: cannot locate formula %r", number, formula)

        if missing:
            system.skipped_steps.append({
                "step_index": number,
                "rule": rule_name,
                "subtype": subtype,
                "from": list(sources),
                "missing_facts": missing,
            })
            for name in missing:
                system.track_missing_fact(name)
            continue

        if len(inputs) != len(sources):
            continue

        try:
            rule = parse_rule(rule_name)
            apply_rule(system, rule, inputs, subtype or rule.default_subtype)
        except RuleApplicationError as e:
            if isinstance(e, UnknownRuleError):
                log.warning("Step #%d: %s. Skipping.", number, e)
            else:
                log.warning("Step #%d failed to apply rule %r: %s", number, rule_name, e)
            system.skipped_steps.append({
                "step_index": number,
                "rule": rule_name,
                "subtype": subtype,
                "from": list(sources),
                "missing_facts": [],
                "error": str(e),
            })


def load_scenario(path, fact_map: Optional[dict] = None,
                  log: Optional[logging.Logger] = None) -> Scenario:
    """
    Build a GentzenSystem from a scenario file and resolved facts.

    Raises ScenarioError for unreadable files and for formulas that YAML
    did not read as strings, FormulaSyntaxError for malformed formulas.
    """
    data = read_scenario(path)
    referenced = collect_referenced_atoms(data)

    system = GentzenSystem()
    for fact in facts_from_resolutions(fact_map or {}):
        system.add_fact(fact)

    propositions = list(data.get("propositions") or [])
    for name in propositions:
        system.add_proposition(name)

    apply_scenario_steps(system, data.get("steps") or [], log)

    return Scenario(
        system=system,
        targets=list(data.get("targets") or []),
        propositions=propositions,
        referenced_atoms=referenced,
    )
