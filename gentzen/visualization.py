"""
Visualization and reporting utilities.
"""

from typing import Optional

from .config import DisplayConfig
from .core.state import GentzenSystem


def _clip(formula: str, display: DisplayConfig) -> str:
    if display.truncate_formulas and len(formula) > display.max_formula_length:
        return formula[:display.max_formula_length - 3] + "..."
    return formula


def print_steps(system: GentzenSystem, display: Optional[DisplayConfig] = None):
    """Print every derivation step with its lineage."""
    display = display or DisplayConfig()
    print(f"\n{'='*60}")
    print("PROOF STEPS")
    print(f"{'='*60}")
    for step in system.steps[:display.max_display_items]:
        sources = ", ".join(str(a + 1) if isinstance(a, int) else a
                            for a in step.antecedents) or "-"
        print(f"  Step #{step.index + 1}: {step.provenance} [{step.subtype}]")
        print(f"    from: {sources}")
        print(f"    formula: {_clip(step.formula or '(none)', display)}")
    hidden = len(system.steps) - display.max_display_items
    if hidden > 0:
        print(f"  ... {hidden} more steps")


def display_results(results: dict, verbose: bool = False,
                    display: Optional[DisplayConfig] = None):
    """Print the outcome of run_gentzen_reasoning."""
    display = display or DisplayConfig()
    print(f"\n{'='*60}")
    print(f"Scenario: {results['scenario_path']}")
    print(f"{'='*60}")

    if results["propositions"]:
        print("Propositions:")
        for name in results["propositions"]:
            print(f"  • {name}")

    print(f"Available facts ({len(results['available_facts'])}):")
    for fact in results["available_facts"][:display.max_display_items]:
        print(f"  ✓ {fact}")

    if results["missing_facts"]:
        print(f"Missing facts ({len(results['missing_facts'])}):")
        for fact in results["missing_facts"]:
            print(f"  ✗ {fact}")

    summary = results["summary"]
    print(f"\nTargets: {summary['proven_targets']}/{summary['total_targets']} proven")
    for target in results["targets"]:
        formula = _clip(target["formula"], display)
        if target["proven"]:
            print(f"  PROVEN: {formula}")
            if target["path"]:
                print(f"     path: {' → '.join(target['path'])}")
        else:
            print(f"  FAILED: {formula}")
            if target["missing_facts"]:
                print(f"     missing: {', '.join(target['missing_facts'])}")
            elif target.get("halt_reason"):
                print(f"     stopped: {target['halt_reason']}")

    if results["skipped_steps"]:
        print(f"\nSkipped steps ({len(results['skipped_steps'])}):")
        for i, step in enumerate(results["skipped_steps"], start=1):
            reason = step.get("error") or f"missing {', '.join(step['missing_facts'])}"
            print(f"  {i}. Step {step['step_index']} ({step['rule']}): {reason}")

    if verbose:
        if summary["loaded_files"]:
            print(f"\nLoaded resolver files: {', '.join(summary['loaded_files'])}")
        print("\nFact resolutions:")
        for fact, resolved in results["fact_resolutions"].items():
            print(f"  {'✓' if resolved else '✗'} {fact}")
        if results.get("system") is not None:
            print_steps(results["system"], display)
    print(f"{'='*60}")


def export_dot(system: GentzenSystem, path="gentzen_graph.dot"):
    """Export the derivation graph as a DOT file for Graphviz visualization."""
    def node_id(ref):
        return f"s{ref + 1}" if isinstance(ref, int) else "fact:" + ref.replace('"', '\\"')

    with open(path, "w", encoding="utf-8") as f:
        f.write("digraph gentzen {\n")
        f.write("  rankdir=BT;\n")
        f.write("  node [shape=box, style=rounded];\n")

        for fact in sorted(system.facts):
            label = fact.replace('"', '\\"')
            f.write(f'  "fact:{label}" [label="{label}", fillcolor=lightgreen, style=filled];\n')
        for step in system.steps:
            label = (step.formula or "").replace('"', '\\"')
            color = "lightgray" if step.provenance == "Proposition" else "lightblue"
            f.write(f'  "{node_id(step.index)}" [label="{label}", fillcolor={color}, style=filled];\n')
            for parent in step.antecedents:
                f.write(f'  "{node_id(parent)}" -> "{node_id(step.index)}";\n')
        f.write("}\n")
    return path
