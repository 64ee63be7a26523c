"""
Single-game facade over LandingEngine.

LandingGame owns one state dict and is its only writer. Each method runs
one engine action and swaps in the resulting state; callers read back a
snapshot with get_state() after every call.
"""

from copy import deepcopy

from skyteam.landing.engine import LandingEngine
from skyteam.landing.state import ROLES, ROLE_NAMES, roll_dice


class LandingGame:

    def __init__(self, dice=None, player_names=None):
        self.engine = LandingEngine(dice)
        self._names = list(player_names or [ROLE_NAMES[r] for r in ROLES])
        self.state = self.engine.initial_state(list(ROLES), self._names)

    def reset(self):
        self.state, _ = self.engine.perform(self.state, "pilot", {"kind": "reset"})

    def roll_dice(self):
        """
        Deal both pools afresh, unconditionally.

        Not a player action: no turn or game-over check, nothing else in
        the state changes. The roll is still written to the log.
        """
        roll_dice(self.state, self.engine.dice)
        self.state["log"].append("Fresh dice rolled for both crew")

    def place_dice(self, die_id, control, role):
        return self._run(role, {"kind": "place_dice", "die_id": die_id, "control": control})

    def place_radio(self, die_id, role, slot_index):
        return self._run(role, {"kind": "place_radio", "die_id": die_id, "slot_index": slot_index})

    def make_coffee(self, die_id, role):
        return self._run(role, {"kind": "make_coffee", "die_id": die_id})

    def drink_coffee(self, role):
        return self._run(role, {"kind": "drink_coffee"})

    def reroll_dice(self, role):
        return self._run(role, {"kind": "reroll_dice"})

    def end_round(self):
        # Round resolution is shared; whoever is up calls it
        return self._run(self.state["current_player"], {"kind": "end_round"})

    def get_state(self):
        return deepcopy(self.state)

    def dice_for(self, role):
        """Convenience lookup of a role's current dice (copies)."""
        return deepcopy(self.state["dice"][role])

    def _run(self, role, action):
        self.state, outcome = self.engine.perform(self.state, role, action)
        return outcome
