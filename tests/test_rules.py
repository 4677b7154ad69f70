import pytest

from expedition_sim.engine import GameRules, ConfigurationError
from expedition_sim.engine.rules import DEFAULT_RULES_PATH


def test_defaults_match_standard_game():
    rules = GameRules()
    assert rules.rounds == 5
    assert rules.hazard_copies == 3
    assert rules.treasure_values == list(range(1, 16))
    assert rules.total_artifacts == 5


def test_bundled_rules_file_matches_defaults():
    assert GameRules.from_yaml(DEFAULT_RULES_PATH) == GameRules()


def test_from_yaml_with_partial_overrides(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(
        "rules:\n"
        "  rounds: 3\n"
        "  treasure_values: [2, 4, 6]\n"
        "  artifacts:\n"
        "    high_value: 12\n",
        encoding="utf-8")
    rules = GameRules.from_yaml(path)
    assert rules.rounds == 3
    assert rules.treasure_values == [2, 4, 6]
    assert rules.hazard_copies == 3
    assert rules.artifact_value(rules.artifact_low_count) == 12


def test_to_dict_round_trips():
    rules = GameRules(rounds=2, hazard_copies=1, total_artifacts=0)
    assert GameRules.from_dict(rules.to_dict()) == rules


@pytest.mark.parametrize("data", [
    {"rounds": "many"},
    {"rounds": 0},
    {"treasure_values": [1, -2]},
    {"artifacts": {"total": -1}},
    ["rounds", 5],
])
def test_invalid_rules_raise(data):
    with pytest.raises(ConfigurationError):
        GameRules.from_dict(data)


def test_malformed_yaml_raises(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("rules: {rounds: [\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        GameRules.from_yaml(path)
