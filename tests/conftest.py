"""
Pytest fixtures for the expedition engine tests.
"""

from typing import Callable, List, Optional, Sequence

import pytest

from expedition_sim.engine import (
    Card, Game, GameRules, Hazard, Player, Strategy, AlwaysContinueStrategy,
)


def treasure(value: int, treasure_id: int) -> Card:
    return Card.treasure(value, treasure_id)


def hazard(kind: Hazard) -> Card:
    return Card.hazard_card(kind)


def artifact(artifact_id: int = 0) -> Card:
    return Card.artifact(artifact_id)


@pytest.fixture
def fixed_deck_game() -> Callable[..., Game]:
    """Builds a game whose every round replays the given deck, unshuffled."""

    def _build(
        deck: Sequence[Card],
        strategies: List[Strategy],
        rounds: int = 1,
        rules: Optional[GameRules] = None,
    ) -> Game:
        players = [Player(f"p{i + 1}", s) for i, s in enumerate(strategies)]
        rules = rules or GameRules(rounds=rounds)
        return Game(players, rules, deck_factory=lambda _round: list(deck), game_id="test")

    return _build


@pytest.fixture
def always() -> Callable[[], Strategy]:
    return AlwaysContinueStrategy
