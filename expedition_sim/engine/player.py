"""
Player
======
Registro dei tesori di un partecipante: bottino della manche, tesoro
messo al sicuro e artefatti reclamati.
"""

from typing import Optional

from .errors import StrategyContractError
from .round_state import RoundState
from .strategies import Strategy


class Player:
    """Partecipante legato a una strategia decisionale."""

    def __init__(self, player_id: str, strategy: Optional[Strategy]):
        self.player_id = player_id
        self.strategy = strategy
        self.round_treasure = 0
        self.total_treasure = 0
        self.artifacts_claimed = 0

    def start_round(self):
        """Azzera il bottino all'inizio di ogni manche."""
        self.round_treasure = 0

    def make_decision(self, state: RoundState) -> bool:
        """
        Chiede alla strategia se proseguire.

        Le eccezioni della strategia si propagano invariate; un verdetto
        non booleano solleva StrategyContractError.
        """
        verdict = self.strategy.should_continue(state)
        if not isinstance(verdict, bool):
            raise StrategyContractError(self.player_id, verdict)
        return verdict

    def collect(self, amount: int):
        _check_amount(amount)
        self.round_treasure += amount

    def leave_round(self, temple_share: int):
        """Esce dal tempio: bottino e quota del tesoro del tempio vanno in banca."""
        _check_amount(temple_share)
        self.round_treasure += temple_share
        self.bank_round_treasure()

    def bank_round_treasure(self):
        self.total_treasure += self.round_treasure
        self.round_treasure = 0

    def lose_round_treasure(self):
        self.round_treasure = 0

    def claim_artifact(self, value: int):
        _check_amount(value)
        self.total_treasure += value
        self.artifacts_claimed += 1

    def __repr__(self):
        return (f"Player({self.player_id!r}, totale={self.total_treasure}, "
                f"artefatti={self.artifacts_claimed})")


def _check_amount(amount: int):
    if amount < 0:
        raise ValueError(f"Importo negativo non ammesso: {amount}")
