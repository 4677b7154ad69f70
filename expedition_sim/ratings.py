"""
Strategy Ratings
================
Classifica persistente delle strategie (scala 0-5), aggiornata a ogni
sweep e mescolata con i valori salvati in precedenza.

Il rating di ogni run deriva dalla posizione in classifica per tesoro
medio e per percentuale di vittorie; il valore salvato è la media fra il
rating precedente e quello nuovo.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Any
from pathlib import Path
from datetime import datetime, timezone
import json
import math

DEFAULT_RATINGS_PATH = Path("results") / "strategy-ratings.json"

MAX_RATING = 5.0
MIN_RATING = 0.0
MAX_WIN_RATE = 100.0
MIN_WIN_RATE = 0.0
DEFAULT_WEIGHT = 0.5
INTERACTION_AVERAGE_WEIGHT = 0.5
INTERACTION_WIN_RATE_WEIGHT = 0.7
WIN_RATE_SCORE_WEIGHT = 0.6


@dataclass(frozen=True)
class StrategyPerformance:
    """Risultato di una strategia in uno sweep."""
    name: str
    average: float
    wins: int
    runs: int


@dataclass(frozen=True)
class InteractionPerformance:
    """Risultato di una strategia contro un campo misto di avversari."""
    name: str
    average: float
    win_rate: float


@dataclass
class _Effective:
    performance: StrategyPerformance
    average: float
    win_rate: float
    sweep_win_rate: float
    interaction_win_rate: float
    average_rating: float = 0.0
    win_rate_rating: float = 0.0
    score_rating: float = 0.0
    score_rank: int = 0


class StrategyRatings:
    """Archivio JSON dei rating delle strategie."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_RATINGS_PATH

    def load(self) -> Dict[str, Dict[str, float]]:
        """Rating salvati, per nome di strategia. File assente = nessun rating."""
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        previous = {}
        for entry in data.get("strategies", []):
            rating = entry.get("rating")
            if rating is None:
                continue
            previous[entry["name"]] = {
                "rating": _clamp_rating(rating),
                "win_rate": _optional_win_rate(entry, "win_rate", "last_win_rate"),
                "sweep_win_rate": _optional_win_rate(entry, "sweep_win_rate", "last_sweep_win_rate"),
                "interaction_win_rate": _optional_win_rate(
                    entry, "interaction_win_rate", "last_interaction_win_rate"),
            }
        return previous

    def update_ratings(
        self,
        performances: List[StrategyPerformance],
        source_label: str = "",
        interactions: Optional[Dict[str, InteractionPerformance]] = None,
        include_interactions: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Aggiorna il file dei rating e restituisce le voci scritte,
        ordinate per rating decrescente.
        """
        if not performances:
            return []

        previous = self.load()
        effective = _effective_performances(performances, interactions, include_interactions)
        _apply_rank_ratings(effective)

        entries = []
        for eff in effective:
            old = previous.get(eff.performance.name)
            if old is None:
                old = {
                    "rating": eff.score_rating,
                    "win_rate": eff.win_rate,
                    "sweep_win_rate": eff.sweep_win_rate,
                    "interaction_win_rate": eff.interaction_win_rate,
                }
            entries.append({
                "name": eff.performance.name,
                "rating": _blend_rating(old["rating"], eff.score_rating),
                "rating_rank": 0,
                "score_rank": eff.score_rank,
                "score_rating": eff.score_rating,
                "last_average": eff.average,
                "win_rate": _blend_win_rate(old["win_rate"], eff.win_rate),
                "last_win_rate": eff.win_rate,
                "sweep_win_rate": _blend_win_rate(old["sweep_win_rate"], eff.sweep_win_rate),
                "last_sweep_win_rate": eff.sweep_win_rate,
                "interaction_win_rate": _blend_win_rate(old["interaction_win_rate"],
                                                        eff.interaction_win_rate),
                "last_interaction_win_rate": eff.interaction_win_rate,
                "wins": eff.performance.wins,
                "runs": eff.performance.runs,
            })

        entries.sort(key=lambda e: (-e["rating"], e["name"].lower()))
        for rank, entry in enumerate(entries, start=1):
            entry["rating_rank"] = rank

        self._write(entries, source_label)
        return entries

    def _write(self, entries: List[Dict[str, Any]], source_label: str):
        data = {
            "updated_at": datetime.now(timezone.utc).isoformat(),
            "rating_weight": DEFAULT_WEIGHT,
        }
        if source_label and source_label.strip():
            data["source"] = source_label
        data["strategies"] = [
            {k: (_round(v) if isinstance(v, float) else v) for k, v in entry.items()}
            for entry in entries
        ]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


def _effective_performances(
    performances: List[StrategyPerformance],
    interactions: Optional[Dict[str, InteractionPerformance]],
    include_interactions: bool
) -> List[_Effective]:
    effective = []
    for perf in performances:
        sweep_win_rate = _to_win_rate(perf.wins, perf.runs)
        interaction = (interactions or {}).get(perf.name)
        interaction_win_rate = (_clamp_win_rate(interaction.win_rate)
                                if interaction is not None else math.nan)

        average = perf.average
        win_rate = sweep_win_rate
        if include_interactions and interaction is not None:
            average = _mix(perf.average, interaction.average, INTERACTION_AVERAGE_WEIGHT)
            win_rate = _clamp_win_rate(_mix(sweep_win_rate, interaction_win_rate,
                                            INTERACTION_WIN_RATE_WEIGHT))
        effective.append(_Effective(perf, average, win_rate, sweep_win_rate, interaction_win_rate))
    return effective


def _apply_rank_ratings(effective: List[_Effective]):
    total = len(effective)
    # sorted è stabile: a parità conta l'ordine di ingresso
    for rank, eff in enumerate(sorted(effective, key=lambda e: -e.average), start=1):
        eff.average_rating = _rating_from_rank(rank, total)
    for rank, eff in enumerate(sorted(effective, key=lambda e: -e.win_rate), start=1):
        eff.win_rate_rating = _rating_from_rank(rank, total)

    for eff in effective:
        eff.score_rating = _mix(eff.average_rating, eff.win_rate_rating, WIN_RATE_SCORE_WEIGHT)
    ordered = sorted(effective, key=lambda e: (-e.score_rating, e.performance.name.lower()))
    for rank, eff in enumerate(ordered, start=1):
        eff.score_rank = rank


def _rating_from_rank(rank: int, total: int) -> float:
    if total <= 1:
        return MAX_RATING
    step = MAX_RATING / (total - 1)
    return _clamp_rating(MAX_RATING - (rank - 1) * step)


def _mix(primary: float, secondary: float, weight: float) -> float:
    return primary * (1.0 - weight) + secondary * weight


def _blend_rating(previous: float, current: float) -> float:
    return _clamp_rating(_mix(previous, current, DEFAULT_WEIGHT))


def _blend_win_rate(previous: float, current: float) -> float:
    if math.isnan(current):
        return 0.0 if math.isnan(previous) else _clamp_win_rate(previous)
    if math.isnan(previous):
        return _clamp_win_rate(current)
    return _clamp_win_rate(_mix(previous, current, DEFAULT_WEIGHT))


def _clamp_rating(rating: float) -> float:
    return min(max(rating, MIN_RATING), MAX_RATING)


def _clamp_win_rate(win_rate: float) -> float:
    return min(max(win_rate, MIN_WIN_RATE), MAX_WIN_RATE)


def _to_win_rate(wins: int, runs: int) -> float:
    if runs <= 0:
        return 0.0
    return wins * 100.0 / runs


def _optional_win_rate(entry: Dict[str, Any], key: str, fallback_key: str) -> float:
    value = entry.get(key, entry.get(fallback_key))
    return math.nan if value is None else _clamp_win_rate(value)


def _round(value: float) -> float:
    # NaN non è JSON valido: le metriche mancanti si scrivono come 0
    return 0.0 if math.isnan(value) else round(value, 4)
