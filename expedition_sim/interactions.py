"""
Strategy Interactions
=====================
Misura quanto il rendimento di ogni strategia dipende dagli avversari:
partite a specchio, scontri uno contro uno e campo misto casuale.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Any
from pathlib import Path
from datetime import datetime, timezone
import json
import random

from .engine import StrategySpec
from .ratings import InteractionPerformance
from .simulator import Simulator

DEFAULT_REPORT_PATH = Path("results") / "strategy-interactions.json"
UNAFFECTED_THRESHOLD = 0.25


@dataclass
class OpponentResult:
    opponent: str
    average: float
    delta: float
    win_rate: float


@dataclass
class StrategyInteraction:
    """Rendimento di una strategia rispetto alla partita a specchio."""
    name: str
    mirror_average: float
    mixed_opponents_average: float
    mixed_opponents_delta: float
    mixed_opponents_win_rate: float
    max_abs_delta: float
    max_delta: float
    min_delta: float
    unaffected: bool
    most_affected_by: Optional[OpponentResult] = None
    matchups: List[OpponentResult] = field(default_factory=list)


@dataclass
class InteractionReport:
    generated_at: str
    simulations: int
    players_per_game: int
    unaffected_threshold: float
    strategies: List[StrategyInteraction]
    most_affected: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def evaluate_interactions(
    simulator: Simulator,
    specs: List[StrategySpec],
    simulations: int,
    players_per_game: int,
    rng: Optional[random.Random] = None
) -> InteractionReport:
    """Valuta ogni strategia contro ciascun avversario e contro un campo misto."""
    rng = rng or random.Random()
    ordered = sorted(specs, key=lambda s: s.name)
    results: List[StrategyInteraction] = []

    for focus in ordered:
        mirror = simulator.simulate_average_treasure(focus, simulations, players_per_game, rng)

        matchups: List[OpponentResult] = []
        most_affected_by: Optional[OpponentResult] = None
        max_abs_delta = 0.0
        for opponent in ordered:
            if opponent is focus:
                continue
            stats = simulator.simulate_matchup(focus, opponent, simulations, players_per_game, 1, rng)
            matchup = OpponentResult(opponent.name, stats.average_treasure,
                                     stats.average_treasure - mirror, stats.win_rate)
            matchups.append(matchup)
            if abs(matchup.delta) > max_abs_delta:
                max_abs_delta = abs(matchup.delta)
                most_affected_by = matchup

        matchups.sort(key=lambda m: (m.win_rate, m.delta, m.opponent.lower()))

        field_specs = [s for s in ordered if s.name != focus.name]
        mixed = simulator.simulate_matchup_against_field(
            focus, field_specs, simulations, players_per_game, rng)

        deltas = [m.delta for m in matchups]
        results.append(StrategyInteraction(
            name=focus.name,
            mirror_average=mirror,
            mixed_opponents_average=mixed.average_treasure,
            mixed_opponents_delta=mixed.average_treasure - mirror,
            mixed_opponents_win_rate=mixed.win_rate,
            max_abs_delta=max_abs_delta,
            max_delta=max(deltas) if most_affected_by else 0.0,
            min_delta=min(deltas) if most_affected_by else 0.0,
            unaffected=max_abs_delta <= UNAFFECTED_THRESHOLD,
            most_affected_by=most_affected_by,
            matchups=matchups
        ))

    most_affected = [
        {
            "name": r.name,
            "max_abs_delta": r.max_abs_delta,
            "opponent": r.most_affected_by.opponent,
            "delta": r.most_affected_by.delta,
        }
        for r in results if r.most_affected_by is not None
    ]
    most_affected.sort(key=lambda e: -e["max_abs_delta"])
    results.sort(key=lambda r: (-r.mixed_opponents_average,
                                -r.mixed_opponents_win_rate,
                                r.name.lower()))

    return InteractionReport(
        generated_at=datetime.now(timezone.utc).isoformat(),
        simulations=simulations,
        players_per_game=players_per_game,
        unaffected_threshold=UNAFFECTED_THRESHOLD,
        strategies=results,
        most_affected=most_affected
    )


def write_report(report: InteractionReport, path: Optional[Path] = None) -> Path:
    """Salva il report in JSON."""
    path = Path(path) if path else DEFAULT_REPORT_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    return path


def interaction_performances(report: InteractionReport) -> Dict[str, InteractionPerformance]:
    """Risultati contro il campo misto, nel formato usato dai rating."""
    return {
        r.name: InteractionPerformance(r.name, r.mixed_opponents_average, r.mixed_opponents_win_rate)
        for r in report.strategies
    }
