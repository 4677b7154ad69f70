"""
Game Engine
===========
Motore di gioco che gestisce lo svolgimento della spedizione: costruzione
del mazzo per ogni manche, rivelazione delle carte, decisioni simultanee
dei giocatori e contabilità di tesori, pericoli e artefatti.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
from enum import Enum
import random
import uuid

from .cards import Card, Hazard
from .errors import ConfigurationError
from .player import Player
from .round_state import RoundState
from .rules import GameRules

DeckFactory = Callable[[int], Sequence[Card]]


class RoundEndReason(Enum):
    HAZARD = "hazard"
    DECK_EXHAUSTED = "deck_exhausted"
    ALL_LEFT = "all_left"


@dataclass(frozen=True)
class CardRevealed:
    """Evento emesso dopo la rivelazione (ed applicazione) di una carta."""
    round_number: int
    card: Card
    turn_number: int
    temple_treasure: int
    hazard_counts: Dict[Hazard, int]
    active_players: int
    artifacts_on_path: int


@dataclass
class RoundResult:
    """Riepilogo di una manche conclusa."""
    round_number: int
    end_reason: RoundEndReason
    turns: int
    ending_hazard: Optional[Hazard] = None
    artifacts_claimed: int = 0
    artifacts_destroyed: int = 0
    totals_after: Dict[str, int] = field(default_factory=dict)


class GameObserver:
    """
    Osservatore della partita. Tutti i metodi sono no-op: le sottoclassi
    ridefiniscono solo quelli che interessano. Le notifiche non hanno
    effetti sullo stato del gioco.
    """

    def on_game_start(self, game_id: str, player_ids: List[str], rules: GameRules):
        pass

    def on_round_start(self, round_number: int, deck_size: int):
        pass

    def on_card_revealed(self, event: CardRevealed):
        pass

    def on_players_left(self, round_number: int, player_ids: List[str], temple_share: int):
        pass

    def on_artifact_claimed(self, player_id: str, artifact_id: int, value: int):
        pass

    def on_round_ended_by_hazard(self, hazard: Hazard, hazard_counts: Dict[Hazard, int]):
        pass

    def on_round_end(self, result: RoundResult):
        pass

    def on_game_end(self, totals: Dict[str, int]):
        pass


class Game:
    """
    Una partita completa tra più giocatori.

    Lo stato che attraversa le manche (copie dei pericoli, carte tesoro
    con i rispettivi resti, riserva di artefatti) appartiene alla partita.
    """

    def __init__(
        self,
        players: List[Player],
        rules: Optional[GameRules] = None,
        rng: Optional[random.Random] = None,
        deck_factory: Optional[DeckFactory] = None,
        game_id: Optional[str] = None
    ):
        """
        Args:
            players: Giocatori, ciascuno con la propria strategia
            rules: Regole della partita (default: regole standard)
            rng: Sorgente casuale per il mescolamento del mazzo
            deck_factory: Se indicato, restituisce il mazzo ordinato della
                manche (indice 0-based) e sostituisce il mescolamento
            game_id: Identificativo della partita (default: casuale)
        """
        if not players:
            raise ConfigurationError("Serve almeno un giocatore")
        ids = [p.player_id for p in players]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"Identificativi dei giocatori duplicati: {ids}")
        missing = [p.player_id for p in players if p.strategy is None]
        if missing:
            raise ConfigurationError(f"Giocatori senza strategia: {missing}")

        self.game_id = game_id or str(uuid.uuid4())[:8]
        self.players = list(players)
        self.rules = rules or GameRules()
        self.rng = rng or random.Random()
        self.deck_factory = deck_factory

        self.hazard_copies: Dict[Hazard, int] = {h: self.rules.hazard_copies for h in Hazard}
        self.treasure_cards: List[Card] = [
            Card.treasure(value, treasure_id)
            for treasure_id, value in enumerate(self.rules.treasure_values)
        ]
        self._remainders: Dict[int, int] = {c.treasure_id: 0 for c in self.treasure_cards}

        self.artifact_supply: List[Card] = []
        self.artifacts_introduced = 0
        self.artifacts_claimed = 0
        self.artifacts_destroyed = 0

        self.rounds_history: List[RoundResult] = []
        self.finished = False

        # Stato della manche in corso
        self._active: List[Player] = []
        self._treasure_path: List[Card] = []
        self._artifact_path: List[Card] = []
        self._hazard_counts: Dict[Hazard, int] = {}

    # ------------------------------------------------------------------
    # API pubblica
    # ------------------------------------------------------------------

    def play(self, observer: Optional[GameObserver] = None) -> Dict[str, int]:
        """
        Gioca tutte le manche e restituisce il tesoro finale di ogni giocatore.
        """
        if self.finished:
            raise RuntimeError(f"La partita {self.game_id} è già stata giocata")
        observer = observer or GameObserver()
        observer.on_game_start(self.game_id, [p.player_id for p in self.players], self.rules)

        for round_index in range(self.rules.rounds):
            result = self._play_round(round_index, observer)
            self.rounds_history.append(result)
            observer.on_round_end(result)

        self.finished = True
        totals = self.totals()
        observer.on_game_end(totals)
        return totals

    def totals(self) -> Dict[str, int]:
        return {p.player_id: p.total_treasure for p in self.players}

    def winners(self) -> List[str]:
        """Giocatori con più tesoro; a parità vince chi ha più artefatti."""
        best_total = max(p.total_treasure for p in self.players)
        leaders = [p for p in self.players if p.total_treasure == best_total]
        best_artifacts = max(p.artifacts_claimed for p in leaders)
        return [p.player_id for p in leaders if p.artifacts_claimed == best_artifacts]

    def carried_remainder(self, treasure_id: int) -> int:
        """Resto attualmente depositato sulla carta tesoro indicata."""
        return self._remainders.get(treasure_id, 0)

    def build_round_deck(self, round_index: int) -> List[Card]:
        """
        Mazzo della manche: copie residue dei pericoli, carte tesoro
        della partita e artefatti in riserva, mescolati.
        """
        if self.deck_factory is not None:
            deck = list(self.deck_factory(round_index))
            for card in deck:
                if card.is_treasure:
                    self._remainders.setdefault(card.treasure_id, 0)
            return deck

        deck = [Card.hazard_card(h) for h in Hazard for _ in range(self.hazard_copies[h])]
        deck.extend(self.treasure_cards)
        deck.extend(self.artifact_supply)
        self.rng.shuffle(deck)
        return deck

    # ------------------------------------------------------------------
    # Svolgimento della manche
    # ------------------------------------------------------------------

    def _play_round(self, round_index: int, observer: GameObserver) -> RoundResult:
        round_number = round_index + 1
        for p in self.players:
            p.start_round()

        if self.artifacts_introduced < self.rules.total_artifacts:
            self.artifact_supply.append(Card.artifact(self.artifacts_introduced))
            self.artifacts_introduced += 1

        deck = self.build_round_deck(round_index)
        observer.on_round_start(round_number, len(deck))

        self._active = list(self.players)
        self._treasure_path = []
        self._artifact_path = []
        self._hazard_counts = {}
        claimed_before = self.artifacts_claimed
        destroyed_before = self.artifacts_destroyed

        turn = 0
        end_reason = RoundEndReason.DECK_EXHAUSTED
        ending_hazard = None

        for card in deck:
            # La prima carta è rivelata senza decisione
            if turn > 0:
                self._decision_phase(round_number, turn, observer)
                if not self._active:
                    end_reason = RoundEndReason.ALL_LEFT
                    break

            turn += 1
            ending_hazard = self._reveal(card)
            observer.on_card_revealed(CardRevealed(
                round_number=round_number,
                card=card,
                turn_number=turn,
                temple_treasure=self.temple_treasure(),
                hazard_counts=dict(self._hazard_counts),
                active_players=len(self._active),
                artifacts_on_path=len(self._artifact_path)
            ))
            if ending_hazard is not None:
                self._end_round_by_hazard(ending_hazard, observer)
                end_reason = RoundEndReason.HAZARD
                break

        if end_reason is RoundEndReason.DECK_EXHAUSTED and self._active:
            # I sopravvissuti escono insieme e si dividono il tempio
            self._resolve_departures(round_number, list(self._active), observer)
            self._active = []

        return RoundResult(
            round_number=round_number,
            end_reason=end_reason,
            turns=turn,
            ending_hazard=ending_hazard,
            artifacts_claimed=self.artifacts_claimed - claimed_before,
            artifacts_destroyed=self.artifacts_destroyed - destroyed_before,
            totals_after=self.totals()
        )

    def temple_treasure(self) -> int:
        """Tesoro condiviso: somma dei resti sulle carte tesoro del percorso."""
        return sum(self._remainders[c.treasure_id] for c in self._treasure_path)

    def _snapshot(self, turn: int, player: Player) -> RoundState:
        return RoundState(
            turn_number=turn,
            active_players=len(self._active),
            temple_treasure=self.temple_treasure(),
            round_treasure=player.round_treasure,
            hazard_counts=self._hazard_counts,
            hazard_copies_remaining=self.hazard_copies,
            artifacts_on_path=len(self._artifact_path),
            artifacts_claimed=self.artifacts_claimed
        )

    def _decision_phase(self, round_number: int, turn: int, observer: GameObserver):
        # Tutti decidono sullo stesso stato condiviso, poi si risolve
        verdicts = [(p, p.make_decision(self._snapshot(turn, p))) for p in self._active]
        leavers = [p for p, stay in verdicts if not stay]
        if leavers:
            self._resolve_departures(round_number, leavers, observer)
        self._active = [p for p, stay in verdicts if stay]

    def _resolve_departures(self, round_number: int, leavers: List[Player], observer: GameObserver):
        share, remainder = divmod(self.temple_treasure(), len(leavers))
        for card in self._treasure_path:
            self._remainders[card.treasure_id] = 0
        if self._treasure_path:
            self._remainders[self._treasure_path[-1].treasure_id] = remainder

        for p in leavers:
            p.leave_round(share)
        observer.on_players_left(round_number, [p.player_id for p in leavers], share)

        if len(leavers) == 1 and self._artifact_path:
            self._claim_artifacts(leavers[0], observer)

    def _claim_artifacts(self, player: Player, observer: GameObserver):
        # Valore calcolato artefatto per artefatto, in ordine di percorso
        for artifact in self._artifact_path:
            value = self.rules.artifact_value(self.artifacts_claimed)
            player.claim_artifact(value)
            self.artifacts_claimed += 1
            self._remove_from_supply(artifact)
            observer.on_artifact_claimed(player.player_id, artifact.artifact_id, value)
        self._artifact_path = []

    def _reveal(self, card: Card) -> Optional[Hazard]:
        """Applica la carta; restituisce il pericolo se chiude la manche."""
        if card.is_treasure:
            total = card.value + self._remainders.get(card.treasure_id, 0)
            share, remainder = divmod(total, len(self._active))
            for p in self._active:
                p.collect(share)
            self._remainders[card.treasure_id] = remainder
            self._treasure_path.append(card)
            return None

        if card.is_hazard:
            count = self._hazard_counts.get(card.hazard, 0) + 1
            self._hazard_counts[card.hazard] = count
            return card.hazard if count >= 2 else None

        self._artifact_path.append(card)
        return None

    def _end_round_by_hazard(self, hazard: Hazard, observer: GameObserver):
        for p in self._active:
            p.lose_round_treasure()
        self._active = []
        self.hazard_copies[hazard] = max(0, self.hazard_copies[hazard] - 1)

        for artifact in self._artifact_path:
            self._remove_from_supply(artifact)
            self.artifacts_destroyed += 1
        self._artifact_path = []
        observer.on_round_ended_by_hazard(hazard, dict(self._hazard_counts))

    def _remove_from_supply(self, artifact: Card):
        if artifact in self.artifact_supply:
            self.artifact_supply.remove(artifact)
