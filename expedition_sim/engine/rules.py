"""
Game Rules
==========
Parametri di configurazione della partita, caricabili da YAML.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .errors import ConfigurationError

DEFAULT_ROUNDS = 5
DEFAULT_HAZARD_COPIES = 3
DEFAULT_TREASURE_VALUES = list(range(1, 16))
DEFAULT_TOTAL_ARTIFACTS = 5
ARTIFACT_LOW_VALUE = 5
ARTIFACT_HIGH_VALUE = 10
ARTIFACT_LOW_COUNT = 3

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "config" / "game_rules.yaml"


@dataclass
class GameRules:
    """Regole della spedizione."""
    rounds: int = DEFAULT_ROUNDS
    hazard_copies: int = DEFAULT_HAZARD_COPIES
    treasure_values: List[int] = field(default_factory=lambda: list(DEFAULT_TREASURE_VALUES))
    total_artifacts: int = DEFAULT_TOTAL_ARTIFACTS
    artifact_low_value: int = ARTIFACT_LOW_VALUE
    artifact_high_value: int = ARTIFACT_HIGH_VALUE
    artifact_low_count: int = ARTIFACT_LOW_COUNT

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Verifica i parametri; solleva ConfigurationError al primo errore."""
        if self.rounds < 1:
            raise ConfigurationError(f"Numero di manche non valido: {self.rounds}")
        if self.hazard_copies < 0:
            raise ConfigurationError(f"Copie per pericolo negative: {self.hazard_copies}")
        negatives = [v for v in self.treasure_values if v < 0]
        if negatives:
            raise ConfigurationError(f"Valori di tesoro negativi: {negatives}")
        for name in ("total_artifacts", "artifact_low_value",
                     "artifact_high_value", "artifact_low_count"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} negativo: {getattr(self, name)}")

    def artifact_value(self, claims_so_far: int) -> int:
        """Valore del prossimo artefatto dati i reclami già avvenuti nella partita."""
        if claims_so_far < self.artifact_low_count:
            return self.artifact_low_value
        return self.artifact_high_value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameRules':
        """Crea le regole da dizionario (chiavi mancanti = valori di default)."""
        if not isinstance(data, dict):
            raise ConfigurationError("Le regole devono essere una mappa chiave/valore")
        artifacts = data.get('artifacts', {}) or {}

        try:
            return cls(
                rounds=int(data.get('rounds', DEFAULT_ROUNDS)),
                hazard_copies=int(data.get('hazard_copies', DEFAULT_HAZARD_COPIES)),
                treasure_values=[int(v) for v in data.get('treasure_values', DEFAULT_TREASURE_VALUES)],
                total_artifacts=int(artifacts.get('total', DEFAULT_TOTAL_ARTIFACTS)),
                artifact_low_value=int(artifacts.get('low_value', ARTIFACT_LOW_VALUE)),
                artifact_high_value=int(artifacts.get('high_value', ARTIFACT_HIGH_VALUE)),
                artifact_low_count=int(artifacts.get('low_count', ARTIFACT_LOW_COUNT)),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Regole non valide: {e}") from e

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> 'GameRules':
        """Carica le regole dal file YAML."""
        path = Path(path) if path else DEFAULT_RULES_PATH
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"File regole non leggibile ({path}): {e}") from e

        return cls.from_dict(data.get('rules', data))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "rounds": data["rounds"],
            "hazard_copies": data["hazard_copies"],
            "treasure_values": data["treasure_values"],
            "artifacts": {
                "total": data["total_artifacts"],
                "low_value": data["artifact_low_value"],
                "high_value": data["artifact_high_value"],
                "low_count": data["artifact_low_count"],
            },
        }
