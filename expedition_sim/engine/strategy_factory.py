"""
Strategy Factory
================
Costruisce le strategie a partire da definizioni dichiarative (dizionari
o profili YAML) e fornisce i cataloghi di strategie da confrontare.

Una definizione è un dizionario con una chiave `type` e i parametri
del costruttore, ad esempio::

    {"type": "leave_after_hazards_or_turns", "max_hazards": 4, "max_turns": 7}

Le chiavi `fallback`, `before` e `after` contengono a loro volta
definizioni annidate.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Any
from pathlib import Path
import copy
import yaml

from .errors import ConfigurationError
from .strategies import (
    Strategy,
    AlwaysContinueStrategy, RiskAverseStrategy, LeaveWhenSoloStrategy,
    LeaveAfterHazardsStrategy, LeaveAfterTurnsStrategy, LeaveAfterTreasureStrategy,
    LeaveAfterTempleTreasureStrategy, LeaveAfterHazardsOrTurnsStrategy,
    LeaveAfterTreasureOrHazardsStrategy, LeaveAfterTreasureOrTurnsStrategy,
    LeaveAfterHazardRiskStrategy, LeaveAfterHazardsWithMemoryStrategy,
    SwitchAfterHazardsStrategy, SwitchAfterHazardsForTurnsStrategy,
    ArtifactSoloExitStrategy, ArtifactOpportunistStrategy,
    ArtifactValueRiskStrategy, ArtifactChaserStrategy,
)

DEFAULT_PROFILES_PATH = Path(__file__).resolve().parent.parent / "config" / "strategy_profiles.yaml"

STRATEGY_TYPES = {
    "always_continue": AlwaysContinueStrategy,
    "risk_averse": RiskAverseStrategy,
    "leave_when_solo": LeaveWhenSoloStrategy,
    "leave_after_hazards": LeaveAfterHazardsStrategy,
    "leave_after_turns": LeaveAfterTurnsStrategy,
    "leave_after_treasure": LeaveAfterTreasureStrategy,
    "leave_after_temple_treasure": LeaveAfterTempleTreasureStrategy,
    "leave_after_hazards_or_turns": LeaveAfterHazardsOrTurnsStrategy,
    "leave_after_treasure_or_hazards": LeaveAfterTreasureOrHazardsStrategy,
    "leave_after_treasure_or_turns": LeaveAfterTreasureOrTurnsStrategy,
    "leave_after_hazard_risk": LeaveAfterHazardRiskStrategy,
    "leave_after_hazards_with_memory": LeaveAfterHazardsWithMemoryStrategy,
    "switch_after_hazards": SwitchAfterHazardsStrategy,
    "switch_after_hazards_for_turns": SwitchAfterHazardsForTurnsStrategy,
    "artifact_solo_exit": ArtifactSoloExitStrategy,
    "artifact_opportunist": ArtifactOpportunistStrategy,
    "artifact_value_risk": ArtifactValueRiskStrategy,
    "artifact_chaser": ArtifactChaserStrategy,
}

NESTED_KEYS = ("fallback", "before", "after")


def build_strategy(definition: Dict[str, Any]) -> Strategy:
    """Crea una nuova istanza di strategia dalla sua definizione."""
    if not isinstance(definition, dict) or "type" not in definition:
        raise ConfigurationError(f"Definizione di strategia non valida: {definition!r}")

    strategy_type = definition["type"]
    if strategy_type not in STRATEGY_TYPES:
        raise ConfigurationError(f"Tipo di strategia '{strategy_type}' sconosciuto. "
                                 f"Disponibili: {sorted(STRATEGY_TYPES)}")

    params = {k: v for k, v in definition.items() if k != "type"}
    for key in NESTED_KEYS:
        if params.get(key) is not None:
            params[key] = build_strategy(params[key])

    try:
        return STRATEGY_TYPES[strategy_type](**params)
    except TypeError as e:
        raise ConfigurationError(f"Parametri non validi per '{strategy_type}': {e}") from e


@dataclass
class StrategySpec:
    """
    Strategia con nome, costruibile su richiesta.

    Contiene solo dati serializzabili, quindi può attraversare i confini
    di processo nelle simulazioni parallele.
    """
    name: str
    definition: Dict[str, Any]
    description: str = ""

    def build(self) -> Strategy:
        return build_strategy(copy.deepcopy(self.definition))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_name: str = "") -> 'StrategySpec':
        """Crea una spec da un profilo YAML."""
        if not isinstance(data, dict) or "strategy" not in data:
            raise ConfigurationError(f"Profilo '{default_name}' senza chiave 'strategy'")
        spec = cls(
            name=data.get('name', default_name),
            definition=data['strategy'],
            description=data.get('description', '')
        )
        # Verifica anticipata della definizione
        spec.build()
        return spec


def _spec(name: str, strategy_type: str, **params) -> StrategySpec:
    return StrategySpec(name, dict(type=strategy_type, **params))


# ----------------------------------------------------------------------
# Cataloghi
# ----------------------------------------------------------------------

def _hazard_sweep(lo: int, hi: int) -> List[StrategySpec]:
    return [_spec(f"Leave after {h} hazards", "leave_after_hazards", max_hazards=h)
            for h in range(lo, hi + 1)]


def _turn_sweep(lo: int, hi: int) -> List[StrategySpec]:
    return [_spec(f"Leave after {t} turns", "leave_after_turns", max_turns=t)
            for t in range(lo, hi + 1)]


def _treasure_sweep(lo: int, hi: int, step: int = 1) -> List[StrategySpec]:
    return [_spec(f"Leave after {t} treasure", "leave_after_treasure", treasure_threshold=t)
            for t in range(lo, hi + 1, step)]


def _temple_treasure_sweep(lo: int, hi: int, step: int = 1) -> List[StrategySpec]:
    return [_spec(f"Leave after temple treasure {t}", "leave_after_temple_treasure",
                  temple_threshold=t)
            for t in range(lo, hi + 1, step)]


def _hazards_or_turns_sweep(h_lo, h_hi, t_lo, t_hi, t_step=1) -> List[StrategySpec]:
    return [_spec(f"Leave after {h} hazards or {t} turns", "leave_after_hazards_or_turns",
                  max_hazards=h, max_turns=t)
            for h in range(h_lo, h_hi + 1)
            for t in range(t_lo, t_hi + 1, t_step)]


def _treasure_or_hazards_sweep(tr_lo, tr_hi, tr_step, h_lo, h_hi) -> List[StrategySpec]:
    return [_spec(f"Leave after {tr} treasure or {h} hazards", "leave_after_treasure_or_hazards",
                  treasure_threshold=tr, max_hazards=h)
            for tr in range(tr_lo, tr_hi + 1, tr_step)
            for h in range(h_lo, h_hi + 1)]


def _treasure_or_turns_sweep(tr_lo, tr_hi, t_lo, t_hi) -> List[StrategySpec]:
    return [_spec(f"Leave after {tr} treasure or {t} turns", "leave_after_treasure_or_turns",
                  treasure_threshold=tr, turn_threshold=t)
            for tr in range(tr_lo, tr_hi + 1)
            for t in range(t_lo, t_hi + 1)]


def _hazard_risk_sweep(risk_lo, risk_hi, hazards_lo, hazards_hi) -> List[StrategySpec]:
    specs = []
    for risk in range(risk_lo, risk_hi + 1):
        max_hazards = min(hazards_hi, hazards_lo + (risk - risk_lo))
        specs.append(_spec(f"Leave after hazard risk {risk} (max hazards {max_hazards})",
                           "leave_after_hazard_risk",
                           max_risk_score=risk, max_hazards=max_hazards))
    return specs


def _switch_after_hazards_sweep(h_lo, h_hi, t_lo, t_hi) -> List[StrategySpec]:
    return [_spec(f"Switch after {h} hazards (stay->leave after {t} turns)",
                  "switch_after_hazards",
                  hazard_threshold=h,
                  before={"type": "always_continue"},
                  after={"type": "leave_after_turns", "max_turns": t})
            for h in range(h_lo, h_hi + 1)
            for t in range(t_lo, t_hi + 1)]


def _artifact_strategies() -> List[StrategySpec]:
    turns_7 = {"type": "leave_after_turns", "max_turns": 7}
    return [
        _spec("Leave when solo with artifact (base 7 turns)", "artifact_solo_exit",
              fallback=turns_7),
        _spec("Artifact opportunist (<=2 players, base hazards 4 or 7 turns)",
              "artifact_opportunist",
              min_artifacts=1, max_players_to_contest=2, min_treasure_to_leave=5,
              hazard_threshold=1,
              fallback={"type": "leave_after_hazards_or_turns", "max_hazards": 4, "max_turns": 7}),
        _spec("Artifact opportunist (<=3 players, 2+ artifacts, base 7 turns)",
              "artifact_opportunist",
              min_artifacts=2, max_players_to_contest=3, min_treasure_to_leave=4,
              hazard_threshold=2, fallback=turns_7),
        _spec("Artifact value vs risk (bank 10, risk 2, <=2 players, base 7 turns)",
              "artifact_value_risk",
              min_bank_value=10, risk_threshold=2, max_players_to_contest=2, fallback=turns_7),
        _spec("Chase artifact (base 7/4, bonus +1/+1, <=2 players)", "artifact_chaser",
              base_turn_limit=7, base_hazard_limit=4, bonus_turns=1, bonus_hazards=1,
              max_players_to_chase=2),
        _spec("Chase artifact (base 7/4, bonus +2/+1, <=3 players)", "artifact_chaser",
              base_turn_limit=7, base_hazard_limit=4, bonus_turns=2, bonus_hazards=1,
              max_players_to_chase=3),
    ]


def build_default_strategies() -> List[StrategySpec]:
    """Catalogo ristretto usato per i rating e per l'IA adattiva."""
    strategies = [_spec("Leave after 1 hazard", "risk_averse")]
    strategies += _hazard_sweep(3, 3)
    strategies += _turn_sweep(6, 8)
    strategies += _treasure_sweep(6, 7)
    strategies += _temple_treasure_sweep(5, 6)
    strategies += _hazard_risk_sweep(2, 3, 3, 4)
    strategies += _hazards_or_turns_sweep(4, 5, 7, 8)
    strategies += _treasure_or_hazards_sweep(7, 8, 1, 4, 5)
    strategies += _treasure_or_turns_sweep(7, 8, 7, 8)
    strategies += _switch_after_hazards_sweep(1, 2, 6, 7)
    strategies += _artifact_strategies()
    return strategies


def build_sweep_strategies() -> List[StrategySpec]:
    """Catalogo ampio per l'esplorazione dei parametri."""
    strategies = [
        _spec("Stay as long as possible", "always_continue"),
        _spec("Leave after 1 hazard", "risk_averse"),
        _spec("Leave when solo", "leave_when_solo"),
    ]
    strategies += _hazard_sweep(2, 4)
    strategies += _turn_sweep(2, 15)
    strategies += _treasure_sweep(2, 10)
    strategies += _temple_treasure_sweep(2, 10)
    strategies += _hazards_or_turns_sweep(1, 3, 2, 8, 2)
    strategies += _treasure_or_hazards_sweep(5, 20, 5, 1, 3)
    strategies += _switch_after_hazards_sweep(1, 3, 2, 6)
    return strategies


CATALOGS = {
    "default": build_default_strategies,
    "sweep": build_sweep_strategies,
}


# ----------------------------------------------------------------------
# Profili
# ----------------------------------------------------------------------

class StrategyFactory:
    """Factory per creare strategie da profili nominati."""

    def __init__(self, profiles_path: Optional[Path] = None):
        self.profiles_path = Path(profiles_path) if profiles_path else None
        self.profiles: Dict[str, StrategySpec] = {}

        if self.profiles_path and self.profiles_path.exists():
            self._load_profiles(self.profiles_path)
        else:
            self._create_default_profiles()

    def _load_profiles(self, path: Path):
        """Carica i profili dal file YAML."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"File profili non leggibile ({path}): {e}") from e

        for profile_id, profile_data in data.get('profiles', {}).items():
            self.profiles[profile_id] = StrategySpec.from_dict(profile_data, profile_id)

        if not self.profiles:
            raise ConfigurationError(f"Nessun profilo definito in {path}")

    def _create_default_profiles(self):
        """Crea profili di default se nessun file è fornito."""
        self.profiles = {
            "daredevil": StrategySpec(
                "Stay as long as possible", {"type": "always_continue"},
                "Resta finché il tempio non crolla"),
            "cautious": StrategySpec(
                "Leave after 1 hazard", {"type": "risk_averse"},
                "Esce al primo pericolo"),
            "balanced": StrategySpec(
                "Leave after 4 hazards or 7 turns",
                {"type": "leave_after_hazards_or_turns", "max_hazards": 4, "max_turns": 7},
                "Equilibrio fra turni e pericoli"),
            "greedy": StrategySpec(
                "Leave after 8 treasure", {"type": "leave_after_treasure", "treasure_threshold": 8},
                "Esce con un bottino di almeno 8"),
            "collector": StrategySpec(
                "Chase artifact (base 7/4, bonus +1/+1, <=2 players)",
                {"type": "artifact_chaser", "base_turn_limit": 7, "base_hazard_limit": 4,
                 "bonus_turns": 1, "bonus_hazards": 1, "max_players_to_chase": 2},
                "Insegue gli artefatti quando restano pochi rivali"),
        }

    def get_spec(self, profile_name: str) -> StrategySpec:
        if profile_name not in self.profiles:
            raise ConfigurationError(f"Profilo '{profile_name}' non trovato. "
                                     f"Disponibili: {list(self.profiles.keys())}")
        return self.profiles[profile_name]

    def create_strategy(self, profile_name: str) -> Strategy:
        """Crea una nuova istanza della strategia del profilo."""
        return self.get_spec(profile_name).build()

    def list_profiles(self) -> List[str]:
        """Restituisce la lista dei profili disponibili."""
        return list(self.profiles.keys())
