import pytest

from expedition_sim.advisor import AIDifficulty, AdaptiveStrategy, StrategyAdvisor
from expedition_sim.engine import Hazard, RoundState, StrategySpec
from expedition_sim.simulator import StrategyScore

ALWAYS = StrategySpec("always", {"type": "always_continue"})
CAUTIOUS = StrategySpec("cautious", {"type": "risk_averse"})

CALM = RoundState(turn_number=2, active_players=3, temple_treasure=1, round_treasure=4)
RISKY = RoundState(turn_number=2, active_players=3, temple_treasure=1, round_treasure=4,
                   hazard_counts={Hazard.MUMMY: 1})


def test_best_scoring_strategy_decides():
    advisor = StrategyAdvisor([StrategyScore("always", ALWAYS, 6.0),
                               StrategyScore("cautious", CAUTIOUS, 8.0)])
    decision = advisor.decide(RISKY)
    assert decision.should_continue is False
    assert decision.strategy_name == "cautious"
    assert decision.score == 8.0

    calm = advisor.decide(CALM)
    assert calm.should_continue is True
    assert calm.strategy_name == "cautious"


def test_ties_favour_continuing():
    advisor = StrategyAdvisor([StrategyScore("cautious", CAUTIOUS, 7.0),
                               StrategyScore("always", ALWAYS, 7.0)])
    decision = advisor.decide(RISKY)
    assert decision.should_continue is True
    assert decision.strategy_name == "always"


def test_advisor_needs_scores():
    with pytest.raises(ValueError):
        StrategyAdvisor([])


@pytest.mark.parametrize("text,expected", [
    ("1", AIDifficulty.EASY),
    (" Easy ", AIDifficulty.EASY),
    ("hard", AIDifficulty.HARD),
    ("", AIDifficulty.MEDIUM),
    ("impossible", AIDifficulty.MEDIUM),
])
def test_difficulty_from_input(text, expected):
    assert AIDifficulty.from_input(text) is expected


def test_difficulty_budgets():
    assert (AIDifficulty.MEDIUM.repeats, AIDifficulty.MEDIUM.simulations) == (2, 2000)


def test_adaptive_strategy_reports_its_choice(capsys):
    advisor = StrategyAdvisor([StrategyScore("cautious", CAUTIOUS, 8.0)])
    strategy = AdaptiveStrategy("Bot", advisor, verbose=True)
    assert strategy.should_continue(RISKY) is False
    assert "Bot esce" in capsys.readouterr().out
    assert str(strategy) == "Adaptive(Bot)"
