"""
Strategies
==========
Politiche decisionali: dato lo stato della manche, proseguire o uscire.

Ogni strategia riceve solo l'istantanea RoundState e restituisce True
per restare nel tempio, False per tornare all'accampamento.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .cards import Hazard
from .round_state import RoundState
from .rules import DEFAULT_HAZARD_COPIES


def hazard_risk_score(state: RoundState) -> int:
    """
    Punteggio di rischio: per ogni pericolo già visto nella manche somma
    le copie che potrebbero ancora ripeterlo.
    """
    has_copies_info = state.has_copies_info
    score = 0
    for hazard in Hazard:
        seen = state.hazard_count(hazard)
        if seen > 0:
            total = state.hazard_copies_left(hazard) if has_copies_info else DEFAULT_HAZARD_COPIES
            score += max(0, total - seen)
    return score


def estimated_temple_share(state: RoundState) -> int:
    if state.active_players == 0:
        return 0
    return state.temple_treasure // state.active_players


class Strategy(ABC):
    """Interfaccia comune delle politiche decisionali."""

    @abstractmethod
    def should_continue(self, state: RoundState) -> bool:
        """True per proseguire nella manche, False per uscire."""

    def __str__(self):
        return type(self).__name__.replace("Strategy", "")


class AlwaysContinueStrategy(Strategy):

    def should_continue(self, state: RoundState) -> bool:
        return True


class RiskAverseStrategy(Strategy):
    """Esce appena compare un qualunque pericolo."""

    def should_continue(self, state: RoundState) -> bool:
        return state.total_hazards_revealed == 0


class LeaveWhenSoloStrategy(Strategy):
    """Esce quando resta da solo nel tempio."""

    def should_continue(self, state: RoundState) -> bool:
        return state.active_players > 1


class LeaveAfterHazardsStrategy(Strategy):

    def __init__(self, max_hazards: int):
        self.max_hazards = max_hazards

    def should_continue(self, state: RoundState) -> bool:
        return state.total_hazards_revealed < self.max_hazards

    def __str__(self):
        return f"LeaveAfterHazards({self.max_hazards})"


class LeaveAfterTurnsStrategy(Strategy):

    def __init__(self, max_turns: int):
        self.max_turns = max_turns

    def should_continue(self, state: RoundState) -> bool:
        return state.turn_number < self.max_turns

    def __str__(self):
        return f"LeaveAfterTurns({self.max_turns})"


class LeaveAfterTreasureStrategy(Strategy):
    """Esce quando il bottino personale raggiunge la soglia."""

    def __init__(self, treasure_threshold: int):
        self.treasure_threshold = treasure_threshold

    def should_continue(self, state: RoundState) -> bool:
        return state.round_treasure < self.treasure_threshold

    def __str__(self):
        return f"LeaveAfterTreasure({self.treasure_threshold})"


class LeaveAfterTempleTreasureStrategy(Strategy):
    """Esce quando il tesoro condiviso del tempio raggiunge la soglia."""

    def __init__(self, temple_threshold: int):
        self.temple_threshold = temple_threshold

    def should_continue(self, state: RoundState) -> bool:
        return state.temple_treasure < self.temple_threshold

    def __str__(self):
        return f"LeaveAfterTempleTreasure({self.temple_threshold})"


class LeaveAfterHazardsOrTurnsStrategy(Strategy):

    def __init__(self, max_hazards: int, max_turns: int):
        self.max_hazards = max_hazards
        self.max_turns = max_turns

    def should_continue(self, state: RoundState) -> bool:
        return (state.total_hazards_revealed < self.max_hazards
                and state.turn_number < self.max_turns)

    def __str__(self):
        return f"LeaveAfterHazardsOrTurns({self.max_hazards},{self.max_turns})"


class LeaveAfterTreasureOrHazardsStrategy(Strategy):

    def __init__(self, treasure_threshold: int, max_hazards: int):
        self.treasure_threshold = treasure_threshold
        self.max_hazards = max_hazards

    def should_continue(self, state: RoundState) -> bool:
        return (state.round_treasure < self.treasure_threshold
                and state.total_hazards_revealed < self.max_hazards)

    def __str__(self):
        return f"LeaveAfterTreasureOrHazards({self.treasure_threshold},{self.max_hazards})"


class LeaveAfterTreasureOrTurnsStrategy(Strategy):

    def __init__(self, treasure_threshold: int, turn_threshold: int):
        self.treasure_threshold = treasure_threshold
        self.turn_threshold = turn_threshold

    def should_continue(self, state: RoundState) -> bool:
        return (state.round_treasure < self.treasure_threshold
                and state.turn_number < self.turn_threshold)

    def __str__(self):
        return f"LeaveAfterTreasureOrTurns({self.treasure_threshold},{self.turn_threshold})"


class LeaveAfterHazardRiskStrategy(Strategy):
    """Esce quando le copie residue rendono troppo probabile una ripetizione."""

    def __init__(self, max_risk_score: int, max_hazards: int):
        self.max_risk_score = max(0, max_risk_score)
        self.max_hazards = max(0, max_hazards)

    def should_continue(self, state: RoundState) -> bool:
        if state.total_hazards_revealed >= self.max_hazards:
            return False
        return hazard_risk_score(state) <= self.max_risk_score

    def __str__(self):
        return f"LeaveAfterHazardRisk({self.max_risk_score},{self.max_hazards})"


class LeaveAfterHazardsWithMemoryStrategy(Strategy):
    """
    Come LeaveAfterHazards, ma alza il limite per ogni pericolo visto
    di cui restano poche copie (meno probabile che si ripeta).
    """

    def __init__(self, base_hazard_limit: int, low_remaining_threshold: int,
                 bonus_per_low_remaining: int):
        self.base_hazard_limit = base_hazard_limit
        self.low_remaining_threshold = low_remaining_threshold
        self.bonus_per_low_remaining = bonus_per_low_remaining

    def should_continue(self, state: RoundState) -> bool:
        bonus = 0
        for hazard in Hazard:
            seen = state.hazard_count(hazard)
            if seen > 0:
                total = (state.hazard_copies_left(hazard) if state.has_copies_info
                         else DEFAULT_HAZARD_COPIES)
                if max(0, total - seen) <= self.low_remaining_threshold:
                    bonus += self.bonus_per_low_remaining
        return state.total_hazards_revealed < self.base_hazard_limit + bonus

    def __str__(self):
        return "LeaveAfterHazardsWithMemory"


class SwitchAfterHazardsStrategy(Strategy):
    """Delega a `before` sotto la soglia di pericoli, ad `after` da lì in poi."""

    def __init__(self, hazard_threshold: int, before: Strategy, after: Strategy):
        self.hazard_threshold = hazard_threshold
        self.before = before
        self.after = after

    def should_continue(self, state: RoundState) -> bool:
        active = self.before if state.total_hazards_revealed < self.hazard_threshold else self.after
        return active.should_continue(state)

    def __str__(self):
        return f"SwitchAfterHazards({self.hazard_threshold},{self.before},{self.after})"


class SwitchAfterHazardsForTurnsStrategy(Strategy):
    """
    Prosegue finché non appaiono pericoli, poi resta per un numero fisso
    di turni ancora.

    Mantiene memoria del turno di innesco; la memoria si azzera quando
    il turno o il conteggio dei pericoli tornano indietro (nuova manche).
    Un'istanza per giocatore.
    """

    def __init__(self, hazard_threshold: int, extra_turns: int):
        self.hazard_threshold = hazard_threshold
        self.extra_turns = max(0, extra_turns)
        self._trigger_turn = -1
        self._last_turn = -1
        self._last_hazards = 0

    def should_continue(self, state: RoundState) -> bool:
        turn = state.turn_number
        hazards = state.total_hazards_revealed
        if turn < self._last_turn or hazards < self._last_hazards:
            self._trigger_turn = -1
        self._last_turn = turn
        self._last_hazards = hazards

        if hazards < self.hazard_threshold:
            return True
        if self._trigger_turn < 0:
            self._trigger_turn = turn
        return turn - self._trigger_turn < self.extra_turns

    def __str__(self):
        return f"SwitchAfterHazardsForTurns({self.hazard_threshold},{self.extra_turns})"


class ArtifactSoloExitStrategy(Strategy):
    """Esce subito se c'è un artefatto sul percorso e si è rimasti soli."""

    def __init__(self, fallback: Optional[Strategy] = None):
        self.fallback = fallback or AlwaysContinueStrategy()

    def should_continue(self, state: RoundState) -> bool:
        if not self.fallback.should_continue(state):
            return False
        return not (state.artifacts_on_path > 0 and state.active_players == 1)


class ArtifactOpportunistStrategy(Strategy):
    """Esce per gli artefatti quando restano pochi giocatori e il bottino o il rischio è alto."""

    def __init__(self, min_artifacts: int, max_players_to_contest: int,
                 min_treasure_to_leave: int, hazard_threshold: int,
                 fallback: Optional[Strategy] = None):
        self.min_artifacts = min_artifacts
        self.max_players_to_contest = max_players_to_contest
        self.min_treasure_to_leave = min_treasure_to_leave
        self.hazard_threshold = hazard_threshold
        self.fallback = fallback or AlwaysContinueStrategy()

    def should_continue(self, state: RoundState) -> bool:
        if not self.fallback.should_continue(state):
            return False
        if state.artifacts_on_path < self.min_artifacts:
            return True
        if state.active_players > self.max_players_to_contest:
            return True
        bank_value = state.round_treasure + estimated_temple_share(state)
        return (bank_value < self.min_treasure_to_leave
                and state.total_hazards_revealed < self.hazard_threshold)


class ArtifactValueRiskStrategy(Strategy):
    """Esce quando valore degli artefatti più bottino supera il rischio di restare."""

    # Valori standard degli artefatti: non dipende dalle regole della partita
    LOW_VALUE = 5
    HIGH_VALUE = 10
    LOW_COUNT = 3

    def __init__(self, min_bank_value: int, risk_threshold: int,
                 max_players_to_contest: int, fallback: Optional[Strategy] = None):
        self.min_bank_value = min_bank_value
        self.risk_threshold = risk_threshold
        self.max_players_to_contest = max_players_to_contest
        self.fallback = fallback or AlwaysContinueStrategy()

    def should_continue(self, state: RoundState) -> bool:
        if not self.fallback.should_continue(state):
            return False
        if state.artifacts_on_path == 0:
            return True
        if state.active_players > self.max_players_to_contest:
            return True
        bank_value = (self._artifact_value(state.artifacts_on_path, state.artifacts_claimed)
                      + state.round_treasure + estimated_temple_share(state))
        return bank_value < self.min_bank_value or hazard_risk_score(state) < self.risk_threshold

    def _artifact_value(self, on_path: int, claimed: int) -> int:
        value = 0
        for i in range(on_path):
            value += self.LOW_VALUE if claimed + i < self.LOW_COUNT else self.HIGH_VALUE
        return value


class ArtifactChaserStrategy(Strategy):
    """Resta più a lungo quando ci sono artefatti e pochi rivali."""

    def __init__(self, base_turn_limit: int, base_hazard_limit: int,
                 bonus_turns: int, bonus_hazards: int, max_players_to_chase: int):
        self.base_turn_limit = base_turn_limit
        self.base_hazard_limit = base_hazard_limit
        self.bonus_turns = bonus_turns
        self.bonus_hazards = bonus_hazards
        self.max_players_to_chase = max_players_to_chase

    def should_continue(self, state: RoundState) -> bool:
        if state.artifacts_on_path > 0 and state.active_players == 1:
            return False
        turn_limit = self.base_turn_limit
        hazard_limit = self.base_hazard_limit
        if state.artifacts_on_path > 0 and state.active_players <= self.max_players_to_chase:
            turn_limit += self.bonus_turns
            hazard_limit += self.bonus_hazards
        return state.turn_number < turn_limit and state.total_hazards_revealed < hazard_limit
