"""
Cards
=====
Modello delle carte della spedizione: tesori, pericoli e artefatti.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum

from .errors import ConfigurationError


class Hazard(Enum):
    """Tipi di pericolo presenti nel tempio."""
    SNAKE = "snake"
    SPIDER = "spider"
    MUMMY = "mummy"
    FIRE = "fire"
    TRAP = "trap"


class CardType(Enum):
    TREASURE = "treasure"
    HAZARD = "hazard"
    ARTIFACT = "artifact"


@dataclass(frozen=True)
class Card:
    """
    Carta rivelata lungo il percorso.

    Le carte sono valori immutabili: il resto accumulato su una carta
    tesoro non vive qui ma nella tabella dei resti del motore,
    indicizzata per treasure_id.
    """
    card_type: CardType
    value: int = 0
    treasure_id: Optional[int] = None
    hazard: Optional[Hazard] = None
    artifact_id: Optional[int] = None

    @classmethod
    def treasure(cls, value: int, treasure_id: int = 0) -> 'Card':
        if value < 0:
            raise ConfigurationError(f"Valore del tesoro negativo: {value}")
        if treasure_id < 0:
            raise ConfigurationError(f"treasure_id negativo: {treasure_id}")
        return cls(CardType.TREASURE, value=value, treasure_id=treasure_id)

    @classmethod
    def hazard_card(cls, hazard: Hazard) -> 'Card':
        return cls(CardType.HAZARD, hazard=hazard)

    @classmethod
    def artifact(cls, artifact_id: int) -> 'Card':
        if artifact_id < 0:
            raise ConfigurationError(f"artifact_id negativo: {artifact_id}")
        return cls(CardType.ARTIFACT, artifact_id=artifact_id)

    @property
    def is_treasure(self) -> bool:
        return self.card_type is CardType.TREASURE

    @property
    def is_hazard(self) -> bool:
        return self.card_type is CardType.HAZARD

    @property
    def is_artifact(self) -> bool:
        return self.card_type is CardType.ARTIFACT

    def __str__(self):
        if self.is_treasure:
            return f"Tesoro {self.value}"
        if self.is_hazard:
            return f"Pericolo {self.hazard.value}"
        return f"Artefatto #{self.artifact_id}"
