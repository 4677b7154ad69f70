"""
Simulator - Sistema di simulazione batch e analisi KPI
"""

from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
from datetime import datetime
from concurrent.futures import ProcessPoolExecutor, as_completed
import random
import statistics

from .engine import (
    Game, GameRules, GameLogger, Player, RoundEndReason,
    StrategyFactory, StrategySpec, AlwaysContinueStrategy, ConfigurationError,
)

TIE_EPSILON = 1e-9
COMEBACK_GAP = 10


@dataclass
class SimulationResult:
    """Risultato di una singola simulazione."""
    game_id: str
    winners: List[str]
    profiles: Dict[str, str]
    totals: Dict[str, int]
    artifacts: Dict[str, int]
    rounds_played: int
    hazard_rounds: int
    total_turns: int
    round_totals: List[Dict[str, int]]
    duration_ms: float


@dataclass
class BatchResult:
    """Risultato di un batch di simulazioni."""
    total_games: int
    profiles: List[str]
    results: List[SimulationResult] = field(default_factory=list)

    # KPI calcolati
    kpis: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MatchupStats:
    average_treasure: float
    win_rate: float


@dataclass
class StrategyScore:
    """Punteggio medio di una strategia del catalogo."""
    name: str
    spec: StrategySpec
    average: float


@dataclass
class SweepEntry:
    """Statistiche cumulative di una strategia su più run."""
    name: str
    spec: StrategySpec
    total_average: float = 0.0
    runs: int = 0
    wins: int = 0

    @property
    def average(self) -> float:
        return self.total_average / self.runs if self.runs else 0.0

    def record_run(self, average: float):
        self.total_average += average
        self.runs += 1


@dataclass
class SweepResult:
    entries: List[SweepEntry]
    repeats: int
    simulations: int
    best_average: List[str] = field(default_factory=list)
    most_wins: List[str] = field(default_factory=list)


def play_game(
    specs: List[StrategySpec],
    labels: List[str],
    rules: GameRules,
    seed: Optional[int] = None,
    log_actions: bool = False
) -> Tuple[SimulationResult, Optional[GameLogger]]:
    """Gioca una partita con una strategia per posto e ne raccoglie i dati."""
    start = datetime.now()

    players = [Player(f"player{i + 1}", spec.build()) for i, spec in enumerate(specs)]
    game = Game(players, rules, random.Random(seed))
    logger = GameLogger(game.game_id) if log_actions else None
    game.play(logger)

    duration = (datetime.now() - start).total_seconds() * 1000
    history = game.rounds_history

    result = SimulationResult(
        game_id=game.game_id,
        winners=game.winners(),
        profiles={p.player_id: label for p, label in zip(players, labels)},
        totals=game.totals(),
        artifacts={p.player_id: p.artifacts_claimed for p in players},
        rounds_played=len(history),
        hazard_rounds=sum(1 for r in history if r.end_reason is RoundEndReason.HAZARD),
        total_turns=sum(r.turns for r in history),
        round_totals=[dict(r.totals_after) for r in history],
        duration_ms=duration
    )
    return result, logger


def _run_job(job: Tuple[List[StrategySpec], List[str], GameRules, Optional[int]]) -> SimulationResult:
    # Funzione di modulo: deve essere serializzabile per ProcessPoolExecutor
    specs, labels, rules, seed = job
    result, _ = play_game(specs, labels, rules, seed)
    return result


class Simulator:
    """Simula partite in batch e calcola KPI."""

    def __init__(self, rules: Optional[GameRules] = None, profiles_path: Optional[Path] = None):
        self.rules = rules or GameRules()
        self.strategy_factory = StrategyFactory(profiles_path)

    def run_single_game(
        self,
        profiles: List[str],
        seed: Optional[int] = None,
        log_actions: bool = False
    ) -> Tuple[SimulationResult, Optional[List[Dict[str, Any]]]]:
        """Esegue una singola partita."""
        specs = [self.strategy_factory.get_spec(p) for p in profiles]
        result, logger = play_game(specs, profiles, self.rules, seed, log_actions)

        if log_actions and logger:
            return result, logger.events
        return result, None

    def run_batch(
        self,
        profiles: List[str],
        num_games: int = 1000,
        base_seed: Optional[int] = None,
        workers: int = 1
    ) -> BatchResult:
        """Esegue un batch di simulazioni, opzionalmente su più processi."""
        print(f"Simulando {num_games} partite: {' vs '.join(profiles)}")

        specs = [self.strategy_factory.get_spec(p) for p in profiles]
        jobs = [
            (specs, list(profiles), self.rules, (base_seed + i) if base_seed is not None else None)
            for i in range(num_games)
        ]

        batch = BatchResult(total_games=num_games, profiles=list(profiles))
        results: List[Optional[SimulationResult]] = [None] * num_games

        if workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = {executor.submit(_run_job, job): i for i, job in enumerate(jobs)}
                for done, future in enumerate(as_completed(futures), start=1):
                    results[futures[future]] = future.result()
                    _report_progress(done, num_games)
        else:
            for i, job in enumerate(jobs):
                results[i] = _run_job(job)
                _report_progress(i + 1, num_games)

        batch.results = results
        batch.kpis = self.calculate_kpis(batch)
        return batch

    def calculate_kpis(self, batch: BatchResult) -> Dict[str, Any]:
        """Calcola tutti i KPI dal batch di risultati."""
        results = batch.results
        n = len(results)

        if n == 0:
            return {}

        seats = list(results[0].totals.keys())

        # Win rates (a parità vincono tutti i giocatori in testa)
        wins = {s: sum(1 for r in results if s in r.winners) for s in seats}
        shared = sum(1 for r in results if len(r.winners) > 1)
        win_rates = {s: wins[s] / n for s in seats}

        scoring = {}
        for s in seats:
            totals = [r.totals[s] for r in results]
            scoring[s] = {
                "profile": results[0].profiles[s],
                "avg_treasure": statistics.mean(totals),
                "treasure_std": statistics.stdev(totals) if n > 1 else 0,
                "max_treasure": max(totals),
                "avg_artifacts": statistics.mean([r.artifacts[s] for r in results])
            }

        rounds = sum(r.rounds_played for r in results)

        return {
            "balance": {
                "win_rates": win_rates,
                "shared_win_rate": shared / n,
                "balance_score": 1 - (max(win_rates.values()) - min(win_rates.values()))
            },
            "scoring": scoring,
            "game_types": {
                "hazard_round_rate": sum(r.hazard_rounds for r in results) / rounds if rounds else 0,
                "avg_turns_per_round": sum(r.total_turns for r in results) / rounds if rounds else 0,
                "avg_winning_total": statistics.mean([max(r.totals.values()) for r in results])
            },
            "snowball": self._analyze_snowball(results),
            "comebacks": self._analyze_comebacks(results),
            "performance": {
                "avg_game_duration_ms": statistics.mean([r.duration_ms for r in results]),
                "total_games": n
            }
        }

    def _analyze_comebacks(self, results: List[SimulationResult]) -> Dict[str, float]:
        """Analizza i comeback (rimonte)."""
        comeback_count = 0
        lead_changes = []

        for r in results:
            changes = 0
            leader = None
            was_behind = False

            for totals in r.round_totals:
                best = max(totals.values())
                leaders = [s for s, t in totals.items() if t == best]
                current_leader = leaders[0] if len(leaders) == 1 else None
                if current_leader and leader and current_leader != leader:
                    changes += 1
                if current_leader:
                    leader = current_leader

                # Il vincitore è stato indietro di almeno COMEBACK_GAP
                if any(best - totals[w] >= COMEBACK_GAP for w in r.winners):
                    was_behind = True

            if was_behind:
                comeback_count += 1
            lead_changes.append(changes)

        n = len(results)
        return {
            "comeback_rate": comeback_count / n if n > 0 else 0,
            "avg_lead_changes": statistics.mean(lead_changes) if lead_changes else 0,
            "max_lead_changes": max(lead_changes) if lead_changes else 0
        }

    def _analyze_snowball(self, results: List[SimulationResult]) -> Dict[str, float]:
        """Analizza il snowball effect: chi guida dopo la prima manche vince?"""
        early_lead_wins = 0
        decided = 0
        decisive_rounds = []

        for r in results:
            if not r.round_totals:
                continue
            first = r.round_totals[0]
            best = max(first.values())
            leaders = [s for s, t in first.items() if t == best]
            if len(leaders) == 1:
                decided += 1
                if leaders[0] in r.winners:
                    early_lead_wins += 1

            # Prima manche dopo la quale il leader finale non viene più superato
            for i, totals in enumerate(r.round_totals):
                if all(max(later.values()) == max(later[w] for w in r.winners)
                       for later in r.round_totals[i:]):
                    decisive_rounds.append(i + 1)
                    break

        seats = len(results[0].totals) if results else 1
        rate = early_lead_wins / decided if decided > 0 else 0
        return {
            "early_lead_win_rate": rate,
            "snowball_index": rate - 1 / seats if decided > 0 else 0,
            "avg_decisive_round": statistics.mean(decisive_rounds) if decisive_rounds else 0,
            "median_decisive_round": statistics.median(decisive_rounds) if decisive_rounds else 0
        }

    # ------------------------------------------------------------------
    # Confronto tra strategie
    # ------------------------------------------------------------------

    def simulate_average_treasure(
        self,
        spec: StrategySpec,
        simulations: int,
        players_per_game: int,
        rng: Optional[random.Random] = None
    ) -> float:
        """Tesoro medio per giocatore in partite in cui tutti usano la stessa strategia."""
        _check_table(players_per_game)
        if simulations <= 0:
            return 0.0
        rng = rng or random.Random()

        total = 0
        for _ in range(simulations):
            players = [Player(f"player{p + 1}", spec.build()) for p in range(players_per_game)]
            total += sum(Game(players, self.rules, rng).play().values())
        return total / (simulations * players_per_game)

    def simulate_matchup(
        self,
        focus: StrategySpec,
        opponent: StrategySpec,
        simulations: int,
        players_per_game: int,
        focus_players: int = 1,
        rng: Optional[random.Random] = None
    ) -> MatchupStats:
        """
        Strategia in esame contro un avversario fisso. Una partita conta come
        vittoria se il miglior giocatore in esame eguaglia il massimo del tavolo.
        """
        _check_table(players_per_game)
        rng = rng or random.Random()
        focus_count = max(1, min(focus_players, players_per_game))
        opponent_count = max(0, players_per_game - focus_count)

        focus_treasure = 0
        focus_wins = 0
        for _ in range(simulations):
            players = [Player(f"focus{p + 1}", focus.build()) for p in range(focus_count)]
            players += [Player(f"opponent{p + 1}", opponent.build()) for p in range(opponent_count)]
            totals = list(Game(players, self.rules, rng).play().values())

            focus_totals = totals[:focus_count]
            focus_treasure += sum(focus_totals)
            if max(focus_totals) == max(totals):
                focus_wins += 1

        if simulations <= 0:
            return MatchupStats(0.0, 0.0)
        return MatchupStats(
            average_treasure=focus_treasure / (simulations * focus_count),
            win_rate=focus_wins * 100.0 / simulations
        )

    def simulate_matchup_against_field(
        self,
        focus: StrategySpec,
        opponents: List[StrategySpec],
        simulations: int,
        players_per_game: int,
        rng: Optional[random.Random] = None
    ) -> MatchupStats:
        """Un giocatore in esame contro avversari estratti a caso dal campo."""
        if not opponents or players_per_game < 1 or simulations <= 0:
            return MatchupStats(0.0, 0.0)
        rng = rng or random.Random()

        focus_treasure = 0
        focus_wins = 0
        for _ in range(simulations):
            players = [Player("focus", focus.build())]
            for p in range(1, players_per_game):
                players.append(Player(f"opponent{p}", rng.choice(opponents).build()))
            totals = Game(players, self.rules, rng).play()

            focus_treasure += totals["focus"]
            if totals["focus"] == max(totals.values()):
                focus_wins += 1

        return MatchupStats(
            average_treasure=focus_treasure / simulations,
            win_rate=focus_wins * 100.0 / simulations
        )

    def simulate_average_turns_until_double_hazard(
        self,
        simulations: int,
        rng: Optional[random.Random] = None
    ) -> float:
        """Lunghezza media di una manche se nessuno esce mai."""
        if simulations <= 0:
            return 0.0
        rng = rng or random.Random()

        total_turns = 0
        for _ in range(simulations):
            probe = Game([Player("probe", AlwaysContinueStrategy())], self.rules, rng)
            seen: Dict[Any, int] = {}
            turns = 0
            for card in probe.build_round_deck(0):
                turns += 1
                if card.is_hazard:
                    seen[card.hazard] = seen.get(card.hazard, 0) + 1
                    if seen[card.hazard] >= 2:
                        break
            total_turns += turns
        return total_turns / simulations

    def evaluate_strategies(
        self,
        specs: List[StrategySpec],
        repeats: int,
        simulations: int,
        players_per_game: int,
        rng: Optional[random.Random] = None
    ) -> List[StrategyScore]:
        """Media del tesoro per strategia su `repeats` ripetizioni."""
        repeats = max(1, repeats)
        rng = rng or random.Random()
        scores = []
        for spec in specs:
            total = sum(self.simulate_average_treasure(spec, simulations, players_per_game, rng)
                        for _ in range(repeats))
            scores.append(StrategyScore(spec.name, spec, total / repeats))
        return scores

    def run_sweep(
        self,
        specs: List[StrategySpec],
        repeats: int = 1,
        simulations: int = 10000,
        players_per_game: int = 4,
        rng: Optional[random.Random] = None,
        verbose: bool = True
    ) -> SweepResult:
        """
        Confronta le strategie su più run. In ogni run vince la strategia con
        la media più alta; le medie entro TIE_EPSILON condividono la vittoria.
        """
        repeats = max(1, repeats)
        rng = rng or random.Random()
        entries = [SweepEntry(spec.name, spec) for spec in specs]

        for run in range(1, repeats + 1):
            if verbose and repeats > 1:
                print(f"Sweep {run}/{repeats} (simulazioni per strategia: {simulations})")

            best_average = float("-inf")
            run_winners: List[SweepEntry] = []
            for entry in entries:
                average = self.simulate_average_treasure(entry.spec, simulations, players_per_game, rng)
                entry.record_run(average)
                if verbose:
                    print(f"  {entry.name}: {average:.2f}")

                if average > best_average + TIE_EPSILON:
                    best_average = average
                    run_winners = [entry]
                elif abs(average - best_average) <= TIE_EPSILON:
                    run_winners.append(entry)

            for entry in run_winners:
                entry.wins += 1

        result = SweepResult(entries=entries, repeats=repeats, simulations=simulations)
        if entries:
            top = max(e.average for e in entries)
            result.best_average = [e.name for e in entries if abs(e.average - top) <= TIE_EPSILON]
            most = max(e.wins for e in entries)
            result.most_wins = [e.name for e in entries if e.wins == most]
        return result


def _check_table(players_per_game: int):
    if players_per_game < 1:
        raise ConfigurationError(f"Giocatori per partita non validi: {players_per_game}")


def _report_progress(done: int, total: int):
    if done % 100 == 0:
        print(f"  {done}/{total} partite completate")
