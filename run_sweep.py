"""
Strategy Sweep Runner
=====================
Confronta un catalogo di strategie con simulazioni ripetute, aggiorna la
classifica dei rating e, se richiesto, il report delle interazioni.
"""

import argparse
import random
from pathlib import Path

from expedition_sim import (
    Simulator, GameRules, StrategyRatings, StrategyPerformance,
    evaluate_interactions, write_report, interaction_performances,
)
from expedition_sim.engine import CATALOGS
from expedition_sim.engine.rules import DEFAULT_RULES_PATH


def _print_sweep_report(result, catalog):
    print(f"\n📊 REPORT SWEEP: catalogo '{catalog}'")
    print(f"{'='*50}")
    ranked = sorted(result.entries, key=lambda e: -e.average)
    for entry in ranked[:15]:
        print(f"  {entry.average:6.2f}  ({entry.wins}/{entry.runs} run)  {entry.name}")
    if len(ranked) > 15:
        print(f"  ... altre {len(ranked) - 15} strategie")

    best = max(e.average for e in result.entries)
    most = max(e.wins for e in result.entries)
    print(f"\nMiglior media su {result.repeats} run: {', '.join(result.best_average)} ({best:.2f})")
    print(f"Più vittorie: {', '.join(result.most_wins)} ({most}/{result.repeats})")
    print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Sweep delle strategie")
    parser.add_argument("--catalog", choices=sorted(CATALOGS), default="default")
    parser.add_argument("--repeats", "-r", type=int, default=1)
    parser.add_argument("--simulations", "-n", type=int, default=10000)
    parser.add_argument("--players", "-p", type=int, default=4)
    parser.add_argument("--rules", default=None)
    parser.add_argument("--seed", "-s", type=int, default=None)
    parser.add_argument("--ratings", default=None,
                        help="File JSON dei rating da aggiornare (es. results/strategy-ratings.json)")
    parser.add_argument("--interactions", default=None,
                        help="File JSON del report interazioni; i risultati entrano nei rating")
    parser.add_argument("--quiet", "-q", action="store_true")

    args = parser.parse_args()

    repeats = max(1, args.repeats)
    simulations = args.simulations if args.simulations >= 1 else 10000

    rules_path = Path(args.rules) if args.rules else DEFAULT_RULES_PATH
    rules = GameRules.from_yaml(rules_path) if rules_path.exists() else GameRules()
    sim = Simulator(rules)
    rng = random.Random(args.seed)
    specs = CATALOGS[args.catalog]()

    print(f"\nSweep di {len(specs)} strategie, {repeats} run da {simulations} simulazioni "
          f"({args.players} giocatori per partita)")
    result = sim.run_sweep(specs, repeats, simulations, args.players, rng, verbose=not args.quiet)
    _print_sweep_report(result, args.catalog)

    interactions = None
    if args.interactions:
        print("🔀 Valutazione delle interazioni tra strategie...")
        report = evaluate_interactions(sim, specs, simulations, args.players, rng)
        path = write_report(report, Path(args.interactions))
        print(f"💾 Report interazioni salvato in: {path}")
        interactions = interaction_performances(report)

    if args.ratings:
        performances = [StrategyPerformance(e.name, e.average, e.wins, e.runs) for e in result.entries]
        source = f"{args.catalog} sweep ({repeats}x{simulations})"
        ratings = StrategyRatings(Path(args.ratings))
        entries = ratings.update_ratings(performances, source, interactions,
                                         include_interactions=interactions is not None)
        print(f"💾 Rating aggiornati in: {ratings.path}")
        for entry in entries[:5]:
            print(f"  #{entry['rating_rank']} {entry['name']}: {entry['rating']:.2f} "
                  f"(win rate {entry['win_rate']:.1f}%)")


if __name__ == "__main__":
    main()
