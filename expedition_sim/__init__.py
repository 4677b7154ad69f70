"""
Expedition AI Simulator - Main Package
"""

from .simulator import (
    Simulator, SimulationResult, BatchResult, MatchupStats,
    StrategyScore, SweepEntry, SweepResult, play_game,
)
from .ratings import StrategyRatings, StrategyPerformance, InteractionPerformance
from .interactions import evaluate_interactions, write_report, interaction_performances
from .advisor import AIDifficulty, StrategyAdvisor, AdaptiveStrategy
from .engine import (
    Card, Hazard, RoundState, GameRules, Player, Game, GameObserver, GameLogger,
    Strategy, StrategySpec, StrategyFactory, ConfigurationError, StrategyContractError,
)

__version__ = "1.0.0"

__all__ = [
    'Simulator', 'SimulationResult', 'BatchResult', 'MatchupStats',
    'StrategyScore', 'SweepEntry', 'SweepResult', 'play_game',
    'StrategyRatings', 'StrategyPerformance', 'InteractionPerformance',
    'evaluate_interactions', 'write_report', 'interaction_performances',
    'AIDifficulty', 'StrategyAdvisor', 'AdaptiveStrategy',
    'Card', 'Hazard', 'RoundState', 'GameRules', 'Player', 'Game', 'GameObserver',
    'GameLogger', 'Strategy', 'StrategySpec', 'StrategyFactory',
    'ConfigurationError', 'StrategyContractError',
]
