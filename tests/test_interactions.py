import json
import random

from expedition_sim.engine import GameRules, StrategySpec
from expedition_sim.interactions import evaluate_interactions, interaction_performances, write_report
from expedition_sim.simulator import Simulator

ALWAYS = StrategySpec("always", {"type": "always_continue"})
QUICK = StrategySpec("quick", {"type": "leave_after_turns", "max_turns": 1})


def _report():
    rules = GameRules(rounds=1, hazard_copies=0, treasure_values=[6, 6], total_artifacts=0)
    return evaluate_interactions(Simulator(rules), [QUICK, ALWAYS], 2, 2, random.Random(0))


def test_matchups_against_mirror_games():
    report = _report()
    always, quick = report.strategies

    assert always.name == "always"
    assert always.mirror_average == 6.0
    assert always.mixed_opponents_average == 9.0
    assert always.mixed_opponents_win_rate == 100.0
    assert always.most_affected_by.opponent == "quick"
    assert always.max_abs_delta == 3.0
    assert not always.unaffected

    assert quick.mirror_average == 3.0
    assert quick.matchups[0].delta == 0.0
    assert quick.matchups[0].win_rate == 0.0
    assert quick.unaffected
    assert quick.most_affected_by is None

    assert [e["name"] for e in report.most_affected] == ["always"]


def test_report_feeds_ratings_and_json(tmp_path):
    report = _report()
    performances = interaction_performances(report)
    assert performances["always"].win_rate == 100.0
    assert performances["quick"].average == 3.0

    path = write_report(report, tmp_path / "interactions.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["players_per_game"] == 2
    assert data["strategies"][0]["matchups"][0]["opponent"] == "quick"
