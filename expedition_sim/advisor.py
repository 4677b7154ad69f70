"""
Advisor
=======
IA adattiva: valuta il catalogo di strategie con simulazioni e, a ogni
decisione, segue il voto della strategia con il punteggio più alto.
"""

from dataclasses import dataclass
from typing import List, Optional
from enum import Enum

from .engine import RoundState, Strategy, build_default_strategies
from .simulator import Simulator, StrategyScore


class AIDifficulty(Enum):
    """Livelli di difficoltà: (ripetizioni, simulazioni per ripetizione)."""
    EASY = (1, 500)
    MEDIUM = (2, 2000)
    HARD = (3, 5000)

    @property
    def repeats(self) -> int:
        return self.value[0]

    @property
    def simulations(self) -> int:
        return self.value[1]

    @classmethod
    def from_input(cls, text: str) -> 'AIDifficulty':
        normalized = (text or "").strip().lower()
        mapping = {
            "1": cls.EASY, "easy": cls.EASY,
            "2": cls.MEDIUM, "medium": cls.MEDIUM,
            "3": cls.HARD, "hard": cls.HARD,
        }
        return mapping.get(normalized, cls.MEDIUM)


@dataclass(frozen=True)
class Decision:
    should_continue: bool
    strategy_name: Optional[str]
    score: float


class StrategyAdvisor:
    """Consiglia se proseguire in base alle strategie valutate."""

    def __init__(self, scores: List[StrategyScore]):
        if not scores:
            raise ValueError("L'advisor richiede almeno una strategia valutata")
        self.scores = scores

    @classmethod
    def build_default(
        cls,
        simulator: Simulator,
        difficulty: AIDifficulty = AIDifficulty.MEDIUM,
        players_per_game: int = 4
    ) -> 'StrategyAdvisor':
        scores = simulator.evaluate_strategies(
            build_default_strategies(),
            difficulty.repeats,
            difficulty.simulations,
            players_per_game
        )
        return cls(scores)

    def decide(self, state: RoundState) -> Decision:
        """
        La miglior strategia che prosegue contro la migliore che esce;
        a parità di punteggio si prosegue.
        """
        best_continue: Optional[StrategyScore] = None
        best_leave: Optional[StrategyScore] = None

        for score in self.scores:
            if score.spec.build().should_continue(state):
                if best_continue is None or score.average > best_continue.average:
                    best_continue = score
            elif best_leave is None or score.average > best_leave.average:
                best_leave = score

        if best_continue is None:
            return Decision(False, best_leave.name, best_leave.average)
        if best_leave is None or best_continue.average >= best_leave.average:
            return Decision(True, best_continue.name, best_continue.average)
        return Decision(False, best_leave.name, best_leave.average)


class AdaptiveStrategy(Strategy):
    """Strategia che delega ogni decisione all'advisor."""

    def __init__(self, name: str, advisor: StrategyAdvisor, verbose: bool = False):
        self.name = name
        self.advisor = advisor
        self.verbose = verbose

    def should_continue(self, state: RoundState) -> bool:
        decision = self.advisor.decide(state)
        if self.verbose:
            action = "prosegue" if decision.should_continue else "esce"
            print(f"{self.name} {action} (strategia migliore: {decision.strategy_name}, "
                  f"punteggio {decision.score:.2f})")
        return decision.should_continue

    def __str__(self):
        return f"Adaptive({self.name})"
