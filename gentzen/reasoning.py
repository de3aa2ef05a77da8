"""
End-to-end reasoning over one scenario file.

    discover resolvers -> run them -> load scenario -> search every target

Everything the run learned comes back as one plain dict, ready for
visualization.display_results or json.dumps (minus the "system" key).
"""

import logging
from typing import Optional

from .config import GentzenConfig
from .core.engine import search_for_proof
from .core.exceptions import GentzenError, ScenarioError
from .core.lexer import is_identifier
from .resolvers import ResolverDiscovery, discover_resolvers, run_fact_resolvers
from .scenario import collect_referenced_atoms, load_scenario, read_scenario
from .validator import validate_scenario

logger = logging.getLogger(__name__)


def _is_fact_name(name) -> bool:
    if isinstance(name, str) and name.startswith("~"):
        name = name[1:]
    return is_identifier(name)


def gather_fact_map(
    resolvers_path=None,
    custom_resolvers: Optional[dict] = None,
    required_atoms: Optional[set] = None,
    log: Optional[logging.Logger] = None,
) -> tuple:
    """
    Discover, merge and run resolvers.

    Custom resolvers override discovered ones of the same name. A name
    that is not an atom (optionally ~-prefixed) is logged and dropped. With
    required_atoms, only resolvers for those names run.
    Returns (fact_map, discovery).
    """
    log = log or logger
    discovery = discover_resolvers(resolvers_path, log) if resolvers_path else ResolverDiscovery()
    resolvers = {}
    for name, resolver in {**discovery.resolvers, **(custom_resolvers or {})}.items():
        if not _is_fact_name(name):
            log.warning("Resolver name %r is not an atom. Skipping.", name)
            continue
        resolvers[name] = resolver
    if required_atoms is not None:
        resolvers = {name: r for name, r in resolvers.items() if name in required_atoms}
    return run_fact_resolvers(resolvers, log), discovery


def evaluate_targets(system, targets: list, config: GentzenConfig) -> list:
    outcomes = []
    for target in targets:
        result = search_for_proof(
            system, target,
            max_depth=config.reasoning.max_proof_depth,
            limits=config.reasoning,
        )
        outcomes.append({
            "formula": target,
            "proven": result.proven,
            "depth": result.depth,
            "missing_facts": result.missing_facts,
            "path": result.path,
            "halt_reason": result.halt_reason,
        })
    return outcomes


def run_gentzen_reasoning(
    scenario_path,
    resolvers_path=None,
    custom_resolvers: Optional[dict] = None,
    validate: bool = False,
    selective_resolution: bool = False,
    config: Optional[GentzenConfig] = None,
    log: Optional[logging.Logger] = None,
) -> dict:
    """
    Run one scenario and return its results.

    Args:
        scenario_path:         YAML scenario file
        resolvers_path:        directory of resolver modules (optional)
        custom_resolvers:      {name: resolver}, overriding discovered ones
        validate:              run the validator first and log its findings;
                               errors are fatal under config.validation.strict_mode
        selective_resolution:  only run resolvers for atoms the scenario uses
        config:                search bounds and depth
        log:                   logger for this run
    """
    config = config or GentzenConfig()
    log = log or logger

    try:
        validation = None
        if validate:
            validation = validate_scenario(scenario_path)
            for error in validation.errors:
                log.warning("Scenario validation: %s", error)
            level = (logging.WARNING if config.validation.warn_on_invalid_formulas
                     else logging.DEBUG)
            for warning in validation.warnings:
                log.log(level, "Scenario validation: %s", warning)
            if config.validation.strict_mode and not validation.is_valid:
                raise ScenarioError(
                    f"Scenario {scenario_path} failed validation ({validation.summary}): "
                    f"{validation.errors[0]}",
                    {"path": str(scenario_path), "errors": list(validation.errors)},
                )

        required_atoms = None
        if selective_resolution and resolvers_path:
            try:
                required_atoms = collect_referenced_atoms(read_scenario(scenario_path))
                log.info("Selective resolution: %d atoms required", len(required_atoms))
            except GentzenError as e:
                log.warning("Failed to extract atoms for selective resolution: %s", e)

        fact_map, discovery = gather_fact_map(
            resolvers_path, custom_resolvers, required_atoms, log)

        scenario = load_scenario(scenario_path, fact_map, log)
        system = scenario.system
        targets = evaluate_targets(system, scenario.targets, config)
    except GentzenError as e:
        log.error("Error running Gentzen reasoning: %s", e)
        raise

    proven = sum(1 for t in targets if t["proven"])
    return {
        "scenario_path": str(scenario_path),
        "propositions": scenario.propositions,
        "targets": targets,
        "summary": {
            "total_targets": len(targets),
            "proven_targets": proven,
            "available_facts": len(system.facts),
            "missing_facts": len(system.missing_facts),
            "skipped_steps": len(system.skipped_steps),
            "loaded_files": list(discovery.loaded_files),
            "total_resolvers": discovery.total_resolvers,
        },
        "available_facts": sorted(system.facts),
        "missing_facts": sorted(system.missing_facts),
        "skipped_steps": list(system.skipped_steps),
        "fact_resolutions": fact_map,
        "validation": validation,
        "system": system,
    }
