"""
Bounded breadth-first proof search.

One round = take a state and try every rule on every step (and every
ordered pair of steps), each on its own clone. A clone survives only if
its new step holds a formula the parent didn't already know. States are
keyed by signature so the same body of knowledge is expanded once.

Three hard bounds make every search return:
    max_iterations   total dequeues
    max_queue_size   live frontier
    max_steps        a state this long has no successors

Running out of rounds (max_depth) is reported as "depth limit".

Hitting a bound means "not found within bounds". It is never a disproof,
and it never reports proven.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from ..config import ReasoningConfig
from ..inference.rules import BINARY_CANDIDATES, UNARY_CANDIDATES, apply_rule
from .exceptions import FormulaSyntaxError, RuleApplicationError
from .parser import canonical_double_neg
from .state import GentzenSystem

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    proven: bool = False
    depth: int = 0
    path: list = field(default_factory=list)
    missing_facts: list = field(default_factory=list)
    halt_reason: str = ""
    iterations: int = 0
    proof_state: Optional[GentzenSystem] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "proven": self.proven,
            "depth": self.depth,
            "path": list(self.path),
            "missing_facts": list(self.missing_facts),
            "halt_reason": self.halt_reason,
            "iterations": self.iterations,
        }


def _try_candidate(parent_known: set, child: GentzenSystem, rule, subtype, steps):
    """Apply one rule on a clone; the clone if it learned something, else None."""
    try:
        new_step = apply_rule(child, rule, steps, subtype)
    except (RuleApplicationError, FormulaSyntaxError):
        return None
    if any(canonical_double_neg(f) not in parent_known for f in new_step.formulas):
        return child
    return None


def expand_one_level(system: GentzenSystem, max_steps: int = 100) -> list:
    """
    Every successor reachable by one rule application.

    Binary rules run over all ordered pairs (i, j), i == j included;
    unary rules over every step. The parent is never modified.
    """
    if len(system.steps) >= max_steps:
        return []

    known = system.known_formulas()
    count = len(system.steps)
    successors = []

    for i in range(count):
        for j in range(count):
            for rule, subtype in BINARY_CANDIDATES:
                child = system.clone()
                child = _try_candidate(known, child, rule, subtype,
                                       [child.steps[i], child.steps[j]])
                if child is not None:
                    successors.append(child)

    for i in range(count):
        for rule, subtype in UNARY_CANDIDATES:
            child = system.clone()
            child = _try_candidate(known, child, rule, subtype, [child.steps[i]])
            if child is not None:
                successors.append(child)

    return successors


def search_for_proof(
    system: GentzenSystem,
    target: str,
    max_depth: Optional[int] = None,
    limits: Optional[ReasoningConfig] = None,
) -> SearchResult:
    """
    Decide whether target is reachable from system within bounds.

    Args:
        system:     the state to search from; only missing_facts is touched
        target:     formula string (any accepted spelling)
        max_depth:  rounds to explore; default limits.max_proof_depth
        limits:     iteration, queue and step bounds

    Raises FormulaSyntaxError if target does not parse.
    """
    limits = limits or ReasoningConfig()
    if max_depth is None:
        max_depth = limits.max_proof_depth
    result = SearchResult()

    if system.is_proved(target):
        result.proven = True
        result.halt_reason = "already proved"
        result.proof_state = system
        return result

    resolvable, missing = system.can_resolve_formula(target)
    if not resolvable:
        result.missing_facts = missing
        result.halt_reason = "missing facts"
        for name in missing:
            system.track_missing_fact(name)
        return result

    queue = deque([(system, 0, [])])
    visited = {system.signature()}
    cut_off = False

    while queue:
        result.iterations += 1
        if result.iterations > limits.max_iterations:
            result.halt_reason = "iteration limit"
            logger.debug("search for %s stopped: %d iterations", target, limits.max_iterations)
            return result
        if len(queue) > limits.max_queue_size:
            result.halt_reason = "queue limit"
            logger.debug("search for %s stopped: queue holds %d states", target, len(queue))
            return result

        state, depth, path = queue.popleft()
        if state.is_proved(target):
            result.proven = True
            result.halt_reason = "proved"
            result.path = path
            result.depth = depth
            result.proof_state = state
            return result
        if depth >= max_depth:
            cut_off = True
            continue

        for child in expand_one_level(state, limits.max_steps):
            if child.is_proved(target):
                result.proven = True
                result.halt_reason = "proved"
                result.path = path + ["final_step"]
                result.depth = depth + 1
                result.proof_state = child
                return result
            signature = child.signature()
            if signature not in visited:
                visited.add(signature)
                queue.append((child, depth + 1, path + [f"step_{depth + 1}"]))

    result.halt_reason = "depth limit" if cut_off else "search space exhausted"
    return result
