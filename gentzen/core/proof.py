"""
Proof extraction and display.

After a search succeeds, these utilities walk back from the step holding
the target through its antecedent indices to recover the derivation.
Fact references end a branch; they are shown by formula.
"""

from typing import Optional

from .parser import normalize_formula
from .state import DerivationStep, GentzenSystem


def find_proof_step(state: GentzenSystem, target: str) -> Optional[DerivationStep]:
    """The earliest step whose formula is the target, up to canonical form."""
    steps = state.find_steps_containing(target)
    return steps[0] if steps else None


def extract_proof(state: GentzenSystem, target: str) -> list:
    """
    Walk back from the target's step through antecedent links.

    Returns (ref, depth) pairs ordered from premises to the target, where
    ref is a DerivationStep or, for a fact reference, the fact's formula.
    Empty if no step holds the target (including when it is a bare fact).
    """
    final = find_proof_step(state, target)
    if final is None:
        return []

    proof = []
    visited = set()

    def walk(ref, depth):
        if ref in visited:
            return
        visited.add(ref)
        if isinstance(ref, str):
            proof.append((ref, depth))
            return
        step = state.steps[ref]
        proof.append((step, depth))
        for parent in step.antecedents:
            walk(parent, depth + 1)

    walk(final.index, 0)
    proof.reverse()
    return proof


def print_proof(state: GentzenSystem, target: str):
    """Pretty-print the derivation of target."""
    proof = extract_proof(state, target)
    if not proof:
        if state.is_proved(target):
            print(f"{target} is a known fact.")
        else:
            print("No proof found.")
        return
    print(f"\n{'='*60}")
    print(f"PROOF of {normalize_formula(target)}")
    print(f"{'='*60}")
    for i, (ref, depth) in enumerate(proof):
        indent = "  " * depth
        if isinstance(ref, str):
            print(f"  {i+1}. {indent}{ref}  [fact]")
            continue
        if ref.antecedents:
            sources = ", ".join(f"#{a + 1}" if isinstance(a, int) else a
                                for a in ref.antecedents)
            src = f"  [{ref.provenance}/{ref.subtype} from: {sources}]"
        else:
            src = f"  [{ref.provenance}]"
        print(f"  {i+1}. {indent}#{ref.index + 1} {ref.formula}{src}")
    print(f"{'='*60}")
