"""
Game Logger
===========
Registra la cronologia della partita come lista di eventi strutturati.
"""

from typing import List, Dict, Any
from datetime import datetime

from .cards import Hazard
from .game_engine import GameObserver, CardRevealed, RoundResult
from .rules import GameRules


class GameLogger(GameObserver):
    """Logger per la cronologia della partita."""

    def __init__(self, game_id: str = ""):
        self.game_id = game_id
        self.events: List[Dict[str, Any]] = []

    def log_event(self, event_type: str, data: Dict[str, Any]):
        """Registra un evento."""
        self.events.append({
            "timestamp": datetime.now().isoformat(),
            "type": event_type,
            "data": data
        })

    def on_game_start(self, game_id: str, player_ids: List[str], rules: GameRules):
        self.game_id = self.game_id or game_id
        self.log_event("game_start", {
            "game_id": game_id,
            "players": list(player_ids),
            "rules": rules.to_dict()
        })

    def on_round_start(self, round_number: int, deck_size: int):
        self.log_event("round_start", {
            "round": round_number,
            "deck_size": deck_size
        })

    def on_card_revealed(self, event: CardRevealed):
        card = event.card
        self.log_event("card_revealed", {
            "round": event.round_number,
            "turn": event.turn_number,
            "card": str(card),
            "card_type": card.card_type.value,
            "value": card.value if card.is_treasure else None,
            "hazard": card.hazard.value if card.is_hazard else None,
            "temple_treasure": event.temple_treasure,
            "hazard_counts": _hazard_map(event.hazard_counts),
            "active_players": event.active_players,
            "artifacts_on_path": event.artifacts_on_path
        })

    def on_players_left(self, round_number: int, player_ids: List[str], temple_share: int):
        self.log_event("players_left", {
            "round": round_number,
            "players": list(player_ids),
            "temple_share": temple_share
        })

    def on_artifact_claimed(self, player_id: str, artifact_id: int, value: int):
        self.log_event("artifact_claimed", {
            "player": player_id,
            "artifact_id": artifact_id,
            "value": value
        })

    def on_round_ended_by_hazard(self, hazard: Hazard, hazard_counts: Dict[Hazard, int]):
        self.log_event("round_end_hazard", {
            "hazard": hazard.value,
            "hazard_counts": _hazard_map(hazard_counts)
        })

    def on_round_end(self, result: RoundResult):
        self.log_event("round_end", {
            "round": result.round_number,
            "reason": result.end_reason.value,
            "turns": result.turns,
            "artifacts_claimed": result.artifacts_claimed,
            "artifacts_destroyed": result.artifacts_destroyed,
            "totals": dict(result.totals_after)
        })

    def on_game_end(self, totals: Dict[str, int]):
        self.log_event("game_end", {
            "totals": dict(totals)
        })

    def events_of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["type"] == event_type]

    def get_summary(self) -> Dict[str, Any]:
        """Restituisce un riepilogo della partita."""
        return {
            "game_id": self.game_id,
            "total_events": len(self.events),
            "events": self.events
        }


def _hazard_map(counts: Dict[Hazard, int]) -> Dict[str, int]:
    return {h.value: c for h, c in counts.items()}
