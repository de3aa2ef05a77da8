"""
Core data structures: DerivationStep and GentzenSystem.

A GentzenSystem is a monotone proof log:

    facts:          formulas known axiomatically (resolver results)
    steps:          append-only arena of DerivationSteps
    missing_facts:  atoms whose resolvability check failed
    skipped_steps:  scenario steps that could not be applied

A step's antecedents are arena indices into `steps` (or, for a detached
fact reference, the fact's formula string). Steps never move and never
change, so a clone that copies the arena keeps every index valid.

Nothing in here depends on inference rules or on the search.
"""

from dataclasses import dataclass, field
from typing import Optional

from .parser import canonical_double_neg, formula_atoms, normalize_formula


PROPOSITION = "Proposition"
FACT_REF = "FactRef"


@dataclass(frozen=True)
class DerivationStep:
    """
    One fact or one rule application. Immutable once made.

    formulas holds exactly one formula for every step a rule produces;
    an empty set is an axiom placeholder.
    index is the step's position in its system's arena, None when the
    step is a detached fact reference.
    """
    provenance: str
    subtype: Optional[str] = None
    antecedents: tuple = ()
    formulas: frozenset = frozenset()
    index: Optional[int] = None

    @property
    def formula(self) -> Optional[str]:
        """The single formula, or None if there isn't exactly one."""
        if len(self.formulas) != 1:
            return None
        return next(iter(self.formulas))

    @property
    def name(self) -> str:
        label = f"#{self.index + 1}" if self.index is not None else "fact"
        return f"{label} {self.formula or '(no formula)'}"

    def __repr__(self):
        return f"DerivationStep({self.provenance}/{self.subtype}: {self.formula!r})"


@dataclass
class GentzenSystem:
    facts: set = field(default_factory=set)
    steps: list = field(default_factory=list)
    missing_facts: set = field(default_factory=set)
    skipped_steps: list = field(default_factory=list)

    @classmethod
    def from_fact_map(cls, fact_map: dict) -> "GentzenSystem":
        """
        Build a system from already-resolved availability.

        Names mapped to a true value become facts; false values add
        nothing. Synthesizing "~Name" for a false resolver is the
        scenario layer's job, not this one's.
        """
        system = cls()
        for name, available in fact_map.items():
            if available:
                system.add_fact(name)
        return system

    # ── Facts and steps ─────────────────────────────────────────────────────

    def add_fact(self, formula: str) -> None:
        self.facts.add(formula)

    def append_step(self, provenance: str, subtype: Optional[str],
                    antecedents: tuple, formula: Optional[str]) -> DerivationStep:
        """Append a new step to the arena and return its handle."""
        step = DerivationStep(
            provenance=provenance,
            subtype=subtype,
            antecedents=tuple(antecedents),
            formulas=frozenset() if formula is None else frozenset({formula}),
            index=len(self.steps),
        )
        self.steps.append(step)
        return step

    def add_proposition(self, formula: str) -> DerivationStep:
        return self.append_step(PROPOSITION, "fact", (), formula)

    def fact_reference(self, formula: str) -> DerivationStep:
        """A detached step standing for a known fact; not added to the arena."""
        return DerivationStep(FACT_REF, "factRef", (), frozenset({formula}), None)

    def lineage_ref(self, step: DerivationStep):
        """What a derived step records for one of its inputs."""
        if step.index is not None:
            return step.index
        return step.formula

    def track_missing_fact(self, name: str) -> None:
        self.missing_facts.add(name)

    # ── Availability (closed-world, auto-negation) ──────────────────────────

    def is_fact_available(self, name: str) -> bool:
        """Exact string match against facts and every step's formula."""
        if name in self.facts:
            return True
        return any(name in step.formulas for step in self.steps)

    def is_atom_resolvable(self, name: str) -> bool:
        """
        Negation as failure.

            available                -> True
            "~X", X not available    -> True
            "X", "~X" available      -> True

        So an atom is unresolvable only when neither it nor its negation
        was ever established.
        """
        if self.is_fact_available(name):
            return True
        if name.startswith("~"):
            return not self.is_fact_available(name[1:])
        return self.is_fact_available(f"~{name}")

    def can_resolve_formula(self, formula: str) -> tuple:
        """
        (all_resolved, unresolved) for every atom a formula mentions.

        Unresolved names are reported without any leading "~".
        Raises FormulaSyntaxError if the formula does not parse.
        """
        missing = [name.lstrip("~") for name in formula_atoms(formula)
                   if not self.is_atom_resolvable(name)]
        return not missing, missing

    # ── Proof status ────────────────────────────────────────────────────────

    def all_formulas(self):
        """Every formula string in the system: facts first, then steps."""
        yield from self.facts
        for step in self.steps:
            yield from step.formulas

    def find_steps_containing(self, formula: str) -> list:
        target = normalize_formula(formula)
        return [step for step in self.steps
                if any(normalize_formula(f) == target for f in step.formulas)]

    def established_formulas(self):
        """Facts and derived formulas. A bare proposition is a premise
        under consideration, not something established."""
        yield from self.facts
        for step in self.steps:
            if step.provenance != PROPOSITION:
                yield from step.formulas

    def is_proved(self, target: str) -> bool:
        """Does any fact or derived step hold the target, up to canonical form?"""
        canonical = normalize_formula(target)
        return any(normalize_formula(f) == canonical for f in self.established_formulas())

    def known_formulas(self) -> set:
        """Double-negation-stripped strings of every formula held."""
        return {canonical_double_neg(f) for f in self.all_formulas()}

    def signature(self) -> str:
        """Visited-state key: sorted, deduplicated known formulas."""
        return " | ".join(sorted(self.known_formulas()))

    # ── Copying and reporting ───────────────────────────────────────────────

    def clone(self) -> "GentzenSystem":
        """
        Independent copy for one search branch.

        Steps are immutable, so the arena list is copied and the steps
        themselves are shared; appending to the clone never touches self.
        """
        return GentzenSystem(
            facts=set(self.facts),
            steps=list(self.steps),
            missing_facts=set(self.missing_facts),
            skipped_steps=list(self.skipped_steps),
        )

    def to_dict(self) -> dict:
        def serialize_ref(ref):
            return ref + 1 if isinstance(ref, int) else ref

        return {
            "facts": sorted(self.facts),
            "steps": [
                {
                    "number": step.index + 1,
                    "provenance": step.provenance,
                    "subtype": step.subtype,
                    "from": [serialize_ref(r) for r in step.antecedents],
                    "formula": step.formula,
                }
                for step in self.steps
            ],
            "missing_facts": sorted(self.missing_facts),
            "skipped_steps": list(self.skipped_steps),
        }
