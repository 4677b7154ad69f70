"""
Round State
===========
Istantanea immutabile della manche consegnata alle strategie prima di
ogni decisione.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .cards import Hazard


@dataclass(frozen=True)
class RoundState:
    """Vista in sola lettura dello stato della manche per un giocatore."""
    turn_number: int
    active_players: int
    temple_treasure: int
    round_treasure: int
    hazard_counts: Mapping[Hazard, int] = field(default_factory=dict)
    hazard_copies_remaining: Mapping[Hazard, int] = field(default_factory=dict)
    artifacts_on_path: int = 0
    artifacts_claimed: int = 0

    def __post_init__(self):
        # Copie private: l'istantanea non deve riflettere modifiche successive
        object.__setattr__(self, 'hazard_counts',
                           MappingProxyType(dict(self.hazard_counts)))
        object.__setattr__(self, 'hazard_copies_remaining',
                           MappingProxyType(dict(self.hazard_copies_remaining)))

    def __eq__(self, other):
        if not isinstance(other, RoundState):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def _key(self):
        return (
            self.turn_number,
            self.active_players,
            self.temple_treasure,
            self.round_treasure,
            tuple(sorted((h.value, c) for h, c in self.hazard_counts.items())),
            tuple(sorted((h.value, c) for h, c in self.hazard_copies_remaining.items())),
            self.artifacts_on_path,
            self.artifacts_claimed,
        )

    def hazard_count(self, hazard: Hazard) -> int:
        """Quante volte il pericolo è uscito in questa manche."""
        return self.hazard_counts.get(hazard, 0)

    @property
    def total_hazards_revealed(self) -> int:
        return sum(self.hazard_counts.values())

    @property
    def has_copies_info(self) -> bool:
        return len(self.hazard_copies_remaining) > 0

    def hazard_copies_left(self, hazard: Hazard) -> int:
        """Copie del pericolo ancora presenti nella partita."""
        return self.hazard_copies_remaining.get(hazard, 0)
