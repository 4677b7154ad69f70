import random

import pytest

from expedition_sim.engine import GameRules, StrategySpec, ConfigurationError
from expedition_sim.simulator import Simulator

ALWAYS = StrategySpec("always", {"type": "always_continue"})
ALWAYS_TOO = StrategySpec("always too", {"type": "always_continue"})
QUICK = StrategySpec("quick", {"type": "leave_after_turns", "max_turns": 1})
CAUTIOUS = StrategySpec("cautious", {"type": "risk_averse"})


@pytest.fixture
def safe_rules():
    # Nessun pericolo e nessun artefatto: risultati deterministici
    return GameRules(rounds=1, hazard_copies=0, treasure_values=[6, 6], total_artifacts=0)


def test_seeded_single_game_is_reproducible():
    simulator = Simulator()
    first, events = simulator.run_single_game(["daredevil", "balanced", "cautious"], seed=42, log_actions=True)
    second, _ = simulator.run_single_game(["daredevil", "balanced", "cautious"], seed=42)
    assert first.totals == second.totals
    assert first.winners == second.winners
    assert first.rounds_played == 5
    assert first.profiles == {"player1": "daredevil", "player2": "balanced", "player3": "cautious"}
    assert events[0]["type"] == "game_start"


def test_unknown_profile_is_rejected():
    with pytest.raises(ConfigurationError):
        Simulator().run_single_game(["daredevil", "kamikaze"])


def test_batch_kpis(capsys):
    batch = Simulator().run_batch(["daredevil", "balanced"], num_games=6, base_seed=1)
    assert len(batch.results) == 6
    assert set(batch.kpis) == {"balance", "scoring", "game_types", "snowball", "comebacks", "performance"}
    rates = batch.kpis["balance"]["win_rates"]
    assert set(rates) == {"player1", "player2"}
    assert all(0.0 <= r <= 1.0 for r in rates.values())
    assert batch.kpis["scoring"]["player2"]["profile"] == "balanced"
    assert 0.0 <= batch.kpis["game_types"]["hazard_round_rate"] <= 1.0
    assert "Simulando 6 partite" in capsys.readouterr().out


def test_seeded_batches_agree():
    simulator = Simulator()
    one = simulator.run_batch(["greedy", "cautious"], num_games=4, base_seed=9)
    two = simulator.run_batch(["greedy", "cautious"], num_games=4, base_seed=9)
    assert [r.totals for r in one.results] == [r.totals for r in two.results]


def test_average_treasure_on_a_safe_deck(safe_rules):
    simulator = Simulator(safe_rules)
    assert simulator.simulate_average_treasure(ALWAYS, 10, 2) == 6.0
    assert simulator.simulate_average_treasure(QUICK, 10, 2) == 3.0
    assert simulator.simulate_average_treasure(ALWAYS, 0, 2) == 0.0


def test_table_size_must_be_positive():
    with pytest.raises(ConfigurationError):
        Simulator().simulate_average_treasure(ALWAYS, 1, 0)


def test_matchup_counts_ties_as_wins(safe_rules):
    stats = Simulator(safe_rules).simulate_matchup(ALWAYS, CAUTIOUS, 5, 3)
    assert stats.average_treasure == 4.0
    assert stats.win_rate == 100.0


def test_matchup_rates_stay_in_range():
    stats = Simulator().simulate_matchup(CAUTIOUS, ALWAYS, 20, 4, rng=random.Random(5))
    assert 0.0 <= stats.win_rate <= 100.0
    assert stats.average_treasure >= 0.0

    field_stats = Simulator().simulate_matchup_against_field(
        QUICK, [ALWAYS, CAUTIOUS], 20, 4, rng=random.Random(5))
    assert 0.0 <= field_stats.win_rate <= 100.0


def test_average_round_length_without_departures():
    turns = Simulator().simulate_average_turns_until_double_hazard(50, random.Random(3))
    # almeno due pericoli, al massimo tutti i tesori più sei pericoli
    assert 2.0 <= turns <= 21.0


def test_sweep_picks_best_average(safe_rules, capsys):
    result = Simulator(safe_rules).run_sweep([ALWAYS, QUICK], repeats=2, simulations=3,
                                            players_per_game=2, verbose=False)
    assert result.best_average == ["always"]
    assert result.most_wins == ["always"]
    assert [e.wins for e in result.entries] == [2, 0]
    assert capsys.readouterr().out == ""


def test_sweep_ties_share_the_win(safe_rules):
    result = Simulator(safe_rules).run_sweep([ALWAYS, ALWAYS_TOO, QUICK], repeats=3, simulations=2,
                                            players_per_game=2, verbose=False)
    assert result.best_average == ["always", "always too"]
    assert [e.wins for e in result.entries] == [3, 3, 0]
    assert result.entries[0].average == 6.0


def test_evaluate_strategies(safe_rules):
    scores = Simulator(safe_rules).evaluate_strategies([ALWAYS, QUICK], 2, 2, 2)
    assert [(s.name, s.average) for s in scores] == [("always", 6.0), ("quick", 3.0)]
