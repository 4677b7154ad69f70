"""
Expedition AI Simulator - Game Engine
"""

from .errors import ConfigurationError, StrategyContractError
from .cards import Card, CardType, Hazard
from .round_state import RoundState
from .rules import GameRules
from .strategies import (
    Strategy, AlwaysContinueStrategy, RiskAverseStrategy, LeaveWhenSoloStrategy,
    LeaveAfterHazardsStrategy, LeaveAfterTurnsStrategy, LeaveAfterTreasureStrategy,
    LeaveAfterTempleTreasureStrategy, LeaveAfterHazardsOrTurnsStrategy,
    LeaveAfterTreasureOrHazardsStrategy, LeaveAfterTreasureOrTurnsStrategy,
    LeaveAfterHazardRiskStrategy, LeaveAfterHazardsWithMemoryStrategy,
    SwitchAfterHazardsStrategy, SwitchAfterHazardsForTurnsStrategy,
    ArtifactSoloExitStrategy, ArtifactOpportunistStrategy,
    ArtifactValueRiskStrategy, ArtifactChaserStrategy, hazard_risk_score,
)
from .player import Player
from .game_engine import Game, GameObserver, CardRevealed, RoundResult, RoundEndReason
from .game_logger import GameLogger
from .strategy_factory import (
    StrategySpec, StrategyFactory, build_strategy,
    build_default_strategies, build_sweep_strategies, CATALOGS,
)

__all__ = [
    'ConfigurationError', 'StrategyContractError',
    'Card', 'CardType', 'Hazard', 'RoundState', 'GameRules',
    'Strategy', 'AlwaysContinueStrategy', 'RiskAverseStrategy', 'LeaveWhenSoloStrategy',
    'LeaveAfterHazardsStrategy', 'LeaveAfterTurnsStrategy', 'LeaveAfterTreasureStrategy',
    'LeaveAfterTempleTreasureStrategy', 'LeaveAfterHazardsOrTurnsStrategy',
    'LeaveAfterTreasureOrHazardsStrategy', 'LeaveAfterTreasureOrTurnsStrategy',
    'LeaveAfterHazardRiskStrategy', 'LeaveAfterHazardsWithMemoryStrategy',
    'SwitchAfterHazardsStrategy', 'SwitchAfterHazardsForTurnsStrategy',
    'ArtifactSoloExitStrategy', 'ArtifactOpportunistStrategy',
    'ArtifactValueRiskStrategy', 'ArtifactChaserStrategy', 'hazard_risk_score',
    'Player', 'Game', 'GameObserver', 'CardRevealed', 'RoundResult', 'RoundEndReason',
    'GameLogger', 'StrategySpec', 'StrategyFactory', 'build_strategy',
    'build_default_strategies', 'build_sweep_strategies', 'CATALOGS',
]
