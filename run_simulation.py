"""
Expedition AI Simulator - CLI
=============================
Script principale per eseguire simulazioni da linea di comando.
"""

import argparse
import json
import random
from pathlib import Path
from datetime import datetime

from expedition_sim import (
    Simulator, GameRules, Game, Player, GameLogger,
    AIDifficulty, StrategyAdvisor, AdaptiveStrategy,
)
from expedition_sim.engine.rules import DEFAULT_RULES_PATH
from expedition_sim.engine.strategy_factory import DEFAULT_PROFILES_PATH


def print_events(events):
    """Stampa il log delle azioni di una partita."""
    print("📜 LOG DELLE AZIONI:\n")
    for event in events:
        event_type = event.get("type", "")
        data = event.get("data", {})

        if event_type == "game_start":
            print(f"🎮 INIZIO PARTITA {data.get('game_id')}")
            print(f"   Giocatori: {', '.join(data.get('players', []))}")
            print()

        elif event_type == "round_start":
            print(f"--- Manche {data.get('round')} (mazzo: {data.get('deck_size')} carte) ---")

        elif event_type == "card_revealed":
            print(f"   Turno {data.get('turn')}: {data.get('card')} "
                  f"(tempio: {data.get('temple_treasure')}, in gioco: {data.get('active_players')})")

        elif event_type == "players_left":
            print(f"   🏕️  Escono {', '.join(data.get('players'))} "
                  f"(+{data.get('temple_share')} dal tempio)")

        elif event_type == "artifact_claimed":
            print(f"   🏺 {data.get('player')} reclama l'artefatto #{data.get('artifact_id')} "
                  f"(+{data.get('value')})")

        elif event_type == "round_end_hazard":
            print(f"   💀 Secondo {data.get('hazard')}: la manche finisce, bottini persi")

        elif event_type == "round_end":
            print(f"   ➜ Fine manche ({data.get('reason')}): {data.get('totals')}\n")

        elif event_type == "game_end":
            print(f"\n{'='*60}")
            print(f"🏁 FINE PARTITA")
            for player, total in data.get("totals", {}).items():
                print(f"   {player}: {total}")


def main():
    parser = argparse.ArgumentParser(description="Expedition AI Simulator")

    parser.add_argument(
        "--players", "-p",
        nargs="+",
        default=["balanced", "balanced", "balanced", "balanced"],
        help="Profili dei giocatori, uno per posto (default: 4 x balanced)"
    )
    parser.add_argument(
        "--games", "-n",
        type=int,
        default=100,
        help="Numero di partite (default: 100)"
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Seed per riproducibilità"
    )
    parser.add_argument(
        "--rules",
        default=None,
        help="File YAML con le regole (default: regole standard)"
    )
    parser.add_argument(
        "--profiles-file",
        default=None,
        help="File YAML con i profili di strategia"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=1,
        help="Processi paralleli per il batch (default: 1)"
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="File JSON per salvare i risultati"
    )
    parser.add_argument(
        "--profiles",
        action="store_true",
        help="Mostra i profili disponibili"
    )
    parser.add_argument(
        "--log",
        action="store_true",
        help="Esegue una singola partita con log dettagliato delle azioni"
    )
    parser.add_argument(
        "--adaptive",
        default=None,
        metavar="DIFFICOLTA",
        help="Aggiunge un'IA adattiva (easy/medium/hard) e gioca una partita con log"
    )

    args = parser.parse_args()

    # Init simulator
    rules_path = Path(args.rules) if args.rules else DEFAULT_RULES_PATH
    rules = GameRules.from_yaml(rules_path) if rules_path.exists() else GameRules()
    profiles_path = Path(args.profiles_file) if args.profiles_file else DEFAULT_PROFILES_PATH
    sim = Simulator(rules, profiles_path)

    # Show profiles
    if args.profiles:
        print("\nProfili disponibili:")
        for p in sim.strategy_factory.list_profiles():
            spec = sim.strategy_factory.profiles[p]
            print(f"  - {p}: {spec.name} - {spec.description}")
        return

    # Single game against the adaptive AI
    if args.adaptive:
        difficulty = AIDifficulty.from_input(args.adaptive)
        print(f"\n🤖 Valutazione del catalogo ({difficulty.name.lower()})...")
        advisor = StrategyAdvisor.build_default(sim, difficulty, len(args.players) + 1)

        players = [Player("ai", AdaptiveStrategy("ai", advisor, verbose=True))]
        players += [Player(f"player{i + 1}", sim.strategy_factory.create_strategy(p))
                    for i, p in enumerate(args.players)]
        game = Game(players, rules, random.Random(args.seed))
        logger = GameLogger(game.game_id)
        game.play(logger)
        print_events(logger.events)
        print(f"   Vincitori: {', '.join(game.winners())}")
        print(f"\n{'='*60}\n")
        return

    # Single game with log
    if args.log:
        print(f"\n{'='*60}")
        print(f"PARTITA SINGOLA CON LOG")
        print(f"{'='*60}")
        for i, p in enumerate(args.players):
            print(f"Player {i + 1}: {p}")
        print(f"{'='*60}\n")

        result, events = sim.run_single_game(args.players, args.seed, log_actions=True)
        print_events(events)
        print(f"   Vincitori: {', '.join(result.winners)}")
        print(f"   Manche finite per pericolo: {result.hazard_rounds}/{result.rounds_played}")

        # Save log to file
        if args.output:
            log_data = {
                "timestamp": datetime.now().isoformat(),
                "config": {
                    "players": args.players,
                    "seed": args.seed,
                    "rules": rules.to_dict()
                },
                "result": {
                    "game_id": result.game_id,
                    "winners": result.winners,
                    "totals": result.totals,
                    "artifacts": result.artifacts
                },
                "events": events
            }
            with open(args.output, 'w', encoding='utf-8') as f:
                json.dump(log_data, f, indent=2, ensure_ascii=False)
            print(f"\n✅ Log salvato in: {args.output}")

        print(f"\n{'='*60}\n")
        return

    # Run simulation
    print(f"\n{'='*60}")
    print(f"EXPEDITION AI SIMULATOR")
    print(f"{'='*60}")
    for i, p in enumerate(args.players):
        print(f"Player {i + 1}: {p}")
    print(f"Partite: {args.games}")
    print(f"{'='*60}\n")

    batch = sim.run_batch(args.players, args.games, args.seed, args.workers)

    # Print results
    kpis = batch.kpis

    print(f"\n{'='*60}")
    print("RISULTATI")
    print(f"{'='*60}")

    bal = kpis.get("balance", {})
    print(f"\n📊 BILANCIAMENTO:")
    for seat, rate in bal.get("win_rates", {}).items():
        print(f"  Win rate {seat}: {rate*100:.1f}%")
    print(f"  Vittorie condivise: {bal.get('shared_win_rate', 0)*100:.1f}%")
    print(f"  Balance Score: {bal.get('balance_score', 0)*100:.1f}%")

    scor = kpis.get("scoring", {})
    print(f"\n📈 TESORO:")
    for seat, stats in scor.items():
        print(f"  {seat} ({stats['profile']}): media {stats['avg_treasure']:.1f} "
              f"± {stats['treasure_std']:.1f}, artefatti {stats['avg_artifacts']:.2f}")

    game = kpis.get("game_types", {})
    print(f"\n🎮 TIPO PARTITE:")
    print(f"  Manche chiuse da un pericolo: {game.get('hazard_round_rate', 0)*100:.1f}%")
    print(f"  Turni medi per manche: {game.get('avg_turns_per_round', 0):.1f}")
    print(f"  Tesoro medio del vincitore: {game.get('avg_winning_total', 0):.1f}")

    snow = kpis.get("snowball", {})
    print(f"\n❄️ SNOWBALL:")
    print(f"  Chi guida dopo la prima manche vince: {snow.get('early_lead_win_rate', 0)*100:.1f}%")
    print(f"  Snowball Index: {snow.get('snowball_index', 0):+.2f}")
    print(f"  Manche decisiva media: {snow.get('avg_decisive_round', 0):.1f}")

    come = kpis.get("comebacks", {})
    print(f"\n🔄 COMEBACK:")
    print(f"  Tasso rimonte: {come.get('comeback_rate', 0)*100:.1f}%")
    print(f"  Cambi di leadership medi: {come.get('avg_lead_changes', 0):.1f}")

    # Save to file
    if args.output:
        output_data = {
            "timestamp": datetime.now().isoformat(),
            "config": {
                "players": args.players,
                "games": args.games,
                "seed": args.seed,
                "rules": rules.to_dict()
            },
            "kpis": kpis,
            "games_summary": [
                {
                    "game_id": r.game_id,
                    "winners": r.winners,
                    "totals": r.totals,
                    "hazard_rounds": r.hazard_rounds
                }
                for r in batch.results
            ]
        }

        with open(args.output, 'w') as f:
            json.dump(output_data, f, indent=2)
        print(f"\n✅ Risultati salvati in: {args.output}")

    print(f"\n{'='*60}\n")


if __name__ == "__main__":
    main()
