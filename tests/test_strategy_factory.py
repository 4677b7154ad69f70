import pytest

from expedition_sim.engine import (
    StrategyFactory, StrategySpec, build_strategy, ConfigurationError, CATALOGS,
    build_default_strategies, build_sweep_strategies,
    LeaveAfterHazardsOrTurnsStrategy, SwitchAfterHazardsStrategy, ArtifactSoloExitStrategy,
)
from expedition_sim.engine.strategy_factory import DEFAULT_PROFILES_PATH


def test_build_flat_definition():
    strategy = build_strategy({"type": "leave_after_hazards_or_turns", "max_hazards": 4, "max_turns": 7})
    assert isinstance(strategy, LeaveAfterHazardsOrTurnsStrategy)
    assert str(strategy) == "LeaveAfterHazardsOrTurns(4,7)"


def test_build_nested_definitions():
    strategy = build_strategy({
        "type": "switch_after_hazards",
        "hazard_threshold": 1,
        "before": {"type": "always_continue"},
        "after": {"type": "leave_after_turns", "max_turns": 3},
    })
    assert isinstance(strategy, SwitchAfterHazardsStrategy)
    assert str(strategy.after) == "LeaveAfterTurns(3)"

    solo = build_strategy({"type": "artifact_solo_exit",
                           "fallback": {"type": "leave_after_turns", "max_turns": 7}})
    assert isinstance(solo, ArtifactSoloExitStrategy)


@pytest.mark.parametrize("definition", [
    {"type": "teleport"},
    {"max_turns": 3},
    {"type": "leave_after_turns", "max_hazards": 3},
    "always_continue",
])
def test_bad_definitions_raise(definition):
    with pytest.raises(ConfigurationError):
        build_strategy(definition)


def test_spec_builds_independent_instances():
    spec = StrategySpec("late", {"type": "switch_after_hazards_for_turns",
                                 "hazard_threshold": 1, "extra_turns": 2})
    assert spec.build() is not spec.build()


def test_catalog_sizes():
    assert len(build_default_strategies()) == 33
    assert len(build_sweep_strategies()) == 77
    assert set(CATALOGS) == {"default", "sweep"}


def test_catalog_names_are_unique_and_buildable():
    for builder in CATALOGS.values():
        specs = builder()
        assert len({s.name for s in specs}) == len(specs)
        for spec in specs:
            spec.build()


def test_bundled_profiles_load():
    factory = StrategyFactory(DEFAULT_PROFILES_PATH)
    assert {"daredevil", "cautious", "balanced", "greedy", "collector"} <= set(factory.list_profiles())
    assert factory.get_spec("balanced").name == "Leave after 4 hazards or 7 turns"


def test_default_profiles_without_file(tmp_path):
    factory = StrategyFactory(tmp_path / "missing.yaml")
    assert factory.list_profiles() == ["daredevil", "cautious", "balanced", "greedy", "collector"]
    with pytest.raises(ConfigurationError):
        factory.create_strategy("kamikaze")


def test_profile_without_strategy_is_rejected(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("profiles:\n  broken:\n    name: Broken\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        StrategyFactory(path)


def test_unreadable_profile_file(tmp_path):
    path = tmp_path / "profiles.yaml"
    path.write_text("profiles: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        StrategyFactory(path)
