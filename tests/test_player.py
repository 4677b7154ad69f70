import pytest

from expedition_sim.engine import (
    Player, RoundState, Strategy, AlwaysContinueStrategy, StrategyContractError,
)


class _Answer(Strategy):
    def __init__(self, answer):
        self.answer = answer

    def should_continue(self, state):
        return self.answer


class _Broken(Strategy):
    def should_continue(self, state):
        raise RuntimeError("boom")


STATE = RoundState(turn_number=1, active_players=1, temple_treasure=0, round_treasure=0)


def test_leaving_banks_stake_and_share():
    player = Player("p1", AlwaysContinueStrategy())
    player.collect(4)
    player.leave_round(2)
    assert player.total_treasure == 6
    assert player.round_treasure == 0


def test_losing_the_round_clears_only_the_stake():
    player = Player("p1", AlwaysContinueStrategy())
    player.collect(3)
    player.bank_round_treasure()
    player.collect(5)
    player.lose_round_treasure()
    assert player.total_treasure == 3
    assert player.round_treasure == 0


def test_claim_artifact_counts_and_banks():
    player = Player("p1", AlwaysContinueStrategy())
    player.claim_artifact(5)
    player.claim_artifact(10)
    assert player.total_treasure == 15
    assert player.artifacts_claimed == 2


def test_start_round_resets_stake():
    player = Player("p1", AlwaysContinueStrategy())
    player.collect(8)
    player.start_round()
    assert player.round_treasure == 0


@pytest.mark.parametrize("action", ["collect", "leave_round", "claim_artifact"])
def test_negative_amounts_are_rejected(action):
    player = Player("p1", AlwaysContinueStrategy())
    with pytest.raises(ValueError):
        getattr(player, action)(-1)


def test_non_boolean_verdict_violates_contract():
    player = Player("p1", _Answer(1))
    with pytest.raises(StrategyContractError):
        player.make_decision(STATE)


def test_strategy_errors_propagate_unchanged():
    player = Player("p1", _Broken())
    with pytest.raises(RuntimeError, match="boom"):
        player.make_decision(STATE)


def test_boolean_verdicts_pass_through():
    assert Player("p1", _Answer(True)).make_decision(STATE) is True
    assert Player("p1", _Answer(False)).make_decision(STATE) is False
