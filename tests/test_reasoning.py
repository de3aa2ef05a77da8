"""
End-to-end tests: resolvers + scenario + search in one run.
"""

import logging
import textwrap

import pytest

from gentzen.config import GentzenConfig
from gentzen.core.exceptions import ScenarioError
from gentzen.reasoning import evaluate_targets, gather_fact_map, run_gentzen_reasoning
from gentzen.core.state import GentzenSystem


ORDER_SCENARIO = """
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
  - ProcessOrder
"""

RESOLVERS = """
def CustomerIsVIP():
    return True

async def PaymentProcessed():
    return True

def Unrelated():
    raise AssertionError("selective resolution should not call this")
"""


@pytest.fixture
def scenario(tmp_path):
    path = tmp_path / "order.yaml"
    path.write_text(ORDER_SCENARIO, encoding="utf-8")
    return path


@pytest.fixture
def resolvers_dir(tmp_path):
    directory = tmp_path / "resolvers"
    directory.mkdir()
    (directory / "business.py").write_text(textwrap.dedent(RESOLVERS), encoding="utf-8")
    return directory


def fast_config():
    cfg = GentzenConfig.for_environment("test")
    cfg.reasoning.max_proof_depth = 2
    cfg.reasoning.max_queue_size = 200
    return cfg


class TestRunGentzenReasoning:
    def test_custom_resolvers(self, scenario):
        results = run_gentzen_reasoning(
            scenario,
            custom_resolvers={"CustomerIsVIP": True, "PaymentProcessed": lambda: True},
            config=fast_config(),
        )
        first, second = results["targets"]
        assert first["proven"]
        assert first["depth"] == 0
        assert not second["proven"]
        assert second["missing_facts"] == []
        assert results["summary"]["total_targets"] == 2
        assert results["summary"]["proven_targets"] == 1
        assert results["available_facts"] == ["CustomerIsVIP", "PaymentProcessed"]
        assert results["propositions"] == ["ProcessOrder"]
        assert results["validation"] is None

    def test_missing_facts_are_reported(self, scenario):
        results = run_gentzen_reasoning(
            scenario, custom_resolvers={"CustomerIsVIP": True}, config=fast_config())
        assert results["missing_facts"] == ["PaymentProcessed"]
        # the second step builds on the first, so both are skipped
        assert results["summary"]["skipped_steps"] == 2
        assert results["skipped_steps"][0]["missing_facts"] == ["PaymentProcessed"]
        assert results["skipped_steps"][1]["step_index"] == 2
        assert results["targets"][0]["missing_facts"] == ["PaymentProcessed"]
        assert results["summary"]["proven_targets"] == 0

    def test_false_resolver_is_resolved_not_missing(self, scenario):
        results = run_gentzen_reasoning(
            scenario,
            custom_resolvers={"CustomerIsVIP": True, "PaymentProcessed": False},
            config=fast_config(),
        )
        assert "~PaymentProcessed" in results["available_facts"]
        assert results["missing_facts"] == []
        assert results["fact_resolutions"] == {"CustomerIsVIP": True, "PaymentProcessed": False}

    def test_discovered_resolvers_with_selective_resolution(self, scenario, resolvers_dir):
        results = run_gentzen_reasoning(
            scenario, resolvers_path=resolvers_dir,
            selective_resolution=True, config=fast_config(),
        )
        assert results["fact_resolutions"] == {"CustomerIsVIP": True, "PaymentProcessed": True}
        assert results["summary"]["total_resolvers"] == 3
        assert len(results["summary"]["loaded_files"]) == 1
        assert results["targets"][0]["proven"]

    def test_custom_resolvers_override_discovered(self, scenario, resolvers_dir):
        results = run_gentzen_reasoning(
            scenario, resolvers_path=resolvers_dir,
            custom_resolvers={"CustomerIsVIP": False},
            selective_resolution=True, config=fast_config(),
        )
        assert results["fact_resolutions"]["CustomerIsVIP"] is False
        assert not results["targets"][0]["proven"]

    def test_validation_is_attached(self, scenario):
        results = run_gentzen_reasoning(
            scenario, custom_resolvers={}, validate=True, config=fast_config())
        assert results["validation"].is_valid

    def test_unreadable_scenario_raises(self, tmp_path):
        with pytest.raises(ScenarioError):
            run_gentzen_reasoning(tmp_path / "absent.yaml", config=fast_config())

    def test_strict_validation_stops_the_run(self, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text("propositions: [A, A]\ntargets: [A]\n", encoding="utf-8")
        cfg = fast_config()
        cfg.validation.strict_mode = True
        with pytest.raises(ScenarioError) as exc:
            run_gentzen_reasoning(path, custom_resolvers={"A": True},
                                  validate=True, config=cfg)
        assert "Duplicate proposition" in str(exc.value)
        assert exc.value.context["errors"] == ["Duplicate proposition name: A"]

    def test_lenient_validation_only_logs(self, tmp_path, caplog):
        path = tmp_path / "dup.yaml"
        path.write_text("propositions: [A, A]\ntargets: [A]\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="gentzen"):
            results = run_gentzen_reasoning(path, custom_resolvers={"A": True},
                                            validate=True, config=fast_config())
        assert not results["validation"].is_valid
        assert results["targets"][0]["proven"]
        assert "Duplicate proposition" in caplog.text

    def test_non_atom_resolver_names_do_not_break_targets(self, scenario, caplog):
        with caplog.at_level(logging.WARNING, logger="gentzen"):
            results = run_gentzen_reasoning(
                scenario,
                custom_resolvers={"CustomerIsVIP": True, "PaymentProcessed": True,
                                  "feature-flag": True, "user.active": False},
                config=fast_config(),
            )
        assert results["targets"][0]["proven"]
        assert "feature-flag" not in results["fact_resolutions"]
        assert "'user.active' is not an atom" in caplog.text


class TestHelpers:
    def test_gather_fact_map_filters_required_atoms(self):
        fact_map, discovery = gather_fact_map(
            custom_resolvers={"A": True, "B": True}, required_atoms={"A"})
        assert fact_map == {"A": True}
        assert discovery.total_resolvers == 0

    def test_gather_fact_map_drops_non_atom_names(self):
        fact_map, _ = gather_fact_map(custom_resolvers={
            "A": True, "~B": False, "feature-flag": True, "AND": True, 3: True,
        })
        assert fact_map == {"A": True, "~B": False}

    def test_evaluate_targets(self):
        system = GentzenSystem(facts={"A"})
        outcomes = evaluate_targets(system, ["A", "Q"], fast_config())
        assert [o["proven"] for o in outcomes] == [True, False]
        assert outcomes[1]["halt_reason"] == "missing facts"
        assert outcomes[0]["path"] == []
