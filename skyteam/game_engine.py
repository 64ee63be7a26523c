"""
Abstract game engine interface.

A front end (the local table facade or a client UI) drives any engine that
implements this interface. It routes player actions through these methods
and shows whatever comes back; every rule lives in the engine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ActionResult:
    """Returned by apply_action to tell the caller what happened."""
    new_state: dict
    # Narrative lines for every player
    log: list[str] = field(default_factory=list)
    # True once the game reached a terminal state
    game_over: bool = False
    # Wire-ready summary of the action's outcome (engine specific)
    outcome: dict[str, Any] = field(default_factory=dict)


class GameEngine(ABC):
    """
    Pure-logic game engine. No networking, no rendering — just rules.

    State is always a plain dict (JSON-serializable) so callers can
    snapshot it and send it anywhere.
    """

    player_count_range: tuple[int, int] = (2, 2)

    @abstractmethod
    def initial_state(self, player_ids: list[str], player_names: list[str]) -> dict:
        """
        Create the starting game state for the given players.
        Called once when a game starts.
        """
        ...

    @abstractmethod
    def get_player_view(self, state: dict, player_id: str) -> dict:
        """
        Return the state as one player should see it.
        Fully cooperative games may return everything.
        """
        ...

    @abstractmethod
    def get_valid_actions(self, state: dict, player_id: str) -> list[dict]:
        """
        Return every action this player could submit right now.
        Each entry has the same shape apply_action accepts.
        """
        ...

    @abstractmethod
    def apply_action(self, state: dict, player_id: str, action: dict) -> ActionResult:
        """
        Validate and apply a player's action to the state.
        Returns an ActionResult with the new state.
        Raises ValueError if the action is rejected; the state is untouched.
        """
        ...

    @abstractmethod
    def get_waiting_for(self, state: dict) -> list[str]:
        """Return the player_ids whose move the game is waiting on."""
        ...

    @abstractmethod
    def get_phase_info(self, state: dict) -> dict:
        """
        Return a summary of the current phase for display purposes.
        e.g. {"phase": "in_round", "round": 3, "description": "Pilot: place a die"}
        """
        ...
