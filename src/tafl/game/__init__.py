"""Game management layer — controller, players, phase state machine.

Quick start::

    from tafl.core import Side, Variant
    from tafl.game import GameController, HumanPlayer

    ctrl = GameController()
    ctrl.new_game(
        attacker=HumanPlayer(Side.ATTACKER, "Alice"),
        defender=HumanPlayer(Side.DEFENDER, "Bob"),
        variant=Variant.preset("brandubh"),
    )
"""

from tafl.game.controller import GameController, GameEvents
from tafl.game.interfaces import GamePhase, IGameController, IPlayer
from tafl.game.player import AIPlayer, HumanPlayer

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "IPlayer",
    # Concrete
    "AIPlayer",
    "GameController",
    "GameEvents",
    "HumanPlayer",
]
