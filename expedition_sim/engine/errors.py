"""
Errors
======
Eccezioni sollevate dal motore di gioco.
"""


class ConfigurationError(ValueError):
    """Configurazione di partita non valida (regole, giocatori, mazzo)."""


class StrategyContractError(TypeError):
    """Una strategia ha restituito un verdetto che non è un booleano."""

    def __init__(self, player_id: str, verdict: object):
        self.player_id = player_id
        self.verdict = verdict
        super().__init__(
            f"La strategia di '{player_id}' deve restituire un bool, "
            f"ricevuto {type(verdict).__name__}: {verdict!r}"
        )
