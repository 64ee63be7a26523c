"""
Landing — game engine implementation.

Implements the GameEngine interface as a pure state machine.
All state is a plain dict. No side effects, no networking.

Round machine:
  in_round → end_round → in_round (next round)
                       → won | crashed | stalled | controls_missing
Terminal states absorb every action except reset.
"""

import logging
from copy import deepcopy

from skyteam.game_engine import GameEngine, ActionResult
from skyteam.landing.dice import RandomDice
from skyteam.landing.state import (
    ROLES, ROLE_NAMES, MAX_COFFEE,
    STATUS_IN_ROUND, STATUS_WON, STATUS_CRASHED, STATUS_STALLED, STATUS_CONTROLS_MISSING,
    create_initial_state, reset_round, reroll_unused, find_die, unused_dice,
    consumes_turn, other_role,
)
from skyteam.landing.controls import (
    DEPLOYMENT_TRACKS, TRACK_OWNERS, TRACK_NAMES,
    track_full, slot_accepts, describe_slot, radio_accepts,
    descent_for, speed_zone, speed_markers, orientation_after, landing_issues,
)
from skyteam.landing.outcomes import (
    Success, Failure, RuleViolation, rejected,
    GAME_OVER, NOT_YOUR_TURN, INVALID_DIE, UNKNOWN_CONTROL, WRONG_ROLE,
    SLOT_OCCUPIED, TRACK_FULL, SLOT_VALUE, RADIO_NEEDS_SLOT, INVALID_SLOT,
    ALREADY_CLEARED, RADIO_VALUE, COFFEE_FULL, NO_COFFEE, ALREADY_CAN_REROLL,
    NO_REROLL, NOTHING_TO_REROLL, CONTROLS_MISSING, STALLED, CRASHED,
)

logger = logging.getLogger(__name__)

PLACEABLE_CONTROLS = ("axis", "engines", "brakes", "landing-gear", "flaps")
CONTROL_LABELS = {
    "axis": "axis",
    "engines": "engines",
    "brakes": "brakes",
    "landing-gear": "landing gear",
    "flaps": "flaps",
}

PHASE_DESCRIPTIONS = {
    STATUS_WON: "Successful landing",
    STATUS_CRASHED: "Crash landing",
    STATUS_STALLED: "Stalled on approach",
    STATUS_CONTROLS_MISSING: "Controls not configured",
}


class LandingEngine(GameEngine):

    player_count_range = (2, 2)

    def __init__(self, dice=None):
        self.dice = dice if dice is not None else RandomDice()
        self._handlers = {
            "place_dice": self._do_place_dice,
            "place_radio": self._do_place_radio,
            "make_coffee": self._do_make_coffee,
            "drink_coffee": self._do_drink_coffee,
            "reroll_dice": self._do_reroll_dice,
            "end_round": self._do_end_round,
        }

    # ── Setup ─────────────────────────────────────────────────────────

    def initial_state(self, player_ids, player_names):
        if len(player_ids) != 2:
            raise ValueError("The landing game requires exactly 2 players")
        return create_initial_state(player_ids, player_names, self.dice)

    # ── Views ─────────────────────────────────────────────────────────

    def get_player_view(self, state, player_id):
        """Everything is open information; add the derived display fields."""
        role = self._player_role(state, player_id)
        view = deepcopy(state)
        view["your_role"] = role
        view["speed_markers"] = speed_markers(state)
        engine_sum = self._engine_sum(state)
        view["engine_sum"] = engine_sum
        view["speed_zone"] = speed_zone(engine_sum) if engine_sum is not None else None
        view.pop("log", None)
        view.pop("next_die_id", None)
        return view

    def get_valid_actions(self, state, player_id):
        role = self._player_role(state, player_id)
        if state["game_over"]:
            return [{"kind": "reset"}]

        actions = []
        dice = unused_dice(state, role)

        if state["current_player"] == role:
            for die in dice:
                for control in PLACEABLE_CONTROLS:
                    if self._passes(self._validate_placement, state, role, control, die["value"]):
                        actions.append({"kind": "place_dice", "die_id": die["id"], "control": control})
                for slot_index in range(len(state["radio_planes"])):
                    if radio_accepts(state, slot_index, die["value"]):
                        actions.append({"kind": "place_radio", "die_id": die["id"], "slot_index": slot_index})

        if state["coffee_tokens"] < state["max_coffee"]:
            for die in dice:
                actions.append({"kind": "make_coffee", "die_id": die["id"]})
        if state["coffee_tokens"] > 0 and not state["can_reroll"][role]:
            actions.append({"kind": "drink_coffee"})
        if state["can_reroll"][role] and dice:
            actions.append({"kind": "reroll_dice"})

        actions.append({"kind": "end_round"})
        actions.append({"kind": "reset"})
        return actions

    def get_waiting_for(self, state):
        if state["game_over"]:
            return []
        return [state["players"][state["current_player"]]["player_id"]]

    def get_phase_info(self, state):
        status = state["status"]
        current = state["players"][state["current_player"]]["name"]

        if status == STATUS_IN_ROUND:
            description = f"{current}: Place a die"
        else:
            description = PHASE_DESCRIPTIONS.get(status, status)

        return {
            "phase": status,
            "round": state["round"],
            "current_player": current,
            "current_role": state["current_player"],
            "approach_distance": state["approach_distance"],
            "description": description,
        }

    # ── Action Dispatch ───────────────────────────────────────────────

    def apply_action(self, state, player_id, action):
        role = self._player_role(state, player_id)
        new_state, outcome = self.perform(state, role, action)
        if not outcome.success and not outcome.terminal:
            raise RuleViolation(outcome.reason, outcome.message)
        return ActionResult(
            new_state=new_state,
            log=[outcome.message],
            game_over=new_state["game_over"],
            outcome=outcome.to_dict(),
        )

    def perform(self, state, role, action):
        """
        Run one action for a role. Returns (state, outcome).

        Rule violations come back as a Failure with the unchanged input state
        object; everything else returns a modified copy.
        """
        kind = action.get("kind")
        if role not in ROLES:
            logger.debug("Rejected %s from unknown role %r", kind, role)
            return state, Failure(WRONG_ROLE, f"Unknown role: {role}")

        if kind == "reset":
            return self._do_reset(state)

        handler = self._handlers.get(kind)
        if handler is None:
            raise ValueError(f"Invalid action kind: {kind}")

        try:
            self._validate_can_act(state, role, kind)
            new_state = deepcopy(state)
            outcome = handler(new_state, role, action)
        except RuleViolation as violation:
            logger.debug("Rejected %s from %s: %s", kind, role, violation)
            return state, rejected(violation)

        if outcome.success and consumes_turn(kind):
            self._advance_turn(new_state)
        new_state["log"].append(outcome.message)
        return new_state, outcome

    # ── Action Implementations ────────────────────────────────────────

    def _do_reset(self, state):
        names = [state["players"][role]["name"] for role in ROLES]
        new_state = create_initial_state(state["player_ids"], names, self.dice)
        outcome = Success("New game started. Roll out the approach!")
        new_state["log"].append(outcome.message)
        return new_state, outcome

    def _do_place_dice(self, state, role, action):
        die = self._require_die(state, role, action.get("die_id"))
        control = action.get("control")
        value = die["value"]
        self._validate_placement(state, role, control, value)

        die["used"] = True
        if control in ("axis", "engines"):
            state[control][role] = value
        elif control == "brakes":
            state["brakes"] = value
        else:
            state[DEPLOYMENT_TRACKS[control]].append(value)

        name = ROLE_NAMES[role]
        return Success(f"{name} placed a {value} on the {CONTROL_LABELS[control]}")

    def _do_place_radio(self, state, role, action):
        die = self._require_die(state, role, action.get("die_id"))
        slot_index = action.get("slot_index")
        planes = state["radio_planes"]

        if not isinstance(slot_index, int) or isinstance(slot_index, bool) \
                or slot_index < 0 or slot_index >= len(planes):
            raise RuleViolation(INVALID_SLOT, "Invalid radio slot")
        if state["radio_cleared"][slot_index]:
            raise RuleViolation(ALREADY_CLEARED, "Plane already cleared")
        if die["value"] != planes[slot_index]:
            raise RuleViolation(RADIO_VALUE, f"You need a {planes[slot_index]} to clear this plane")

        die["used"] = True
        state["radio_cleared"][slot_index] = True
        return Success(f"{ROLE_NAMES[role]} cleared radio plane {slot_index + 1}")

    def _do_make_coffee(self, state, role, action):
        if state["coffee_tokens"] >= state["max_coffee"]:
            raise RuleViolation(COFFEE_FULL, f"Coffee pot is full ({MAX_COFFEE} max)")
        die = self._require_die(state, role, action.get("die_id"))

        die["used"] = True
        state["coffee_tokens"] += 1
        return Success(f"Coffee brewed! {state['coffee_tokens']} coffee(s) ready")

    def _do_drink_coffee(self, state, role, action):
        if state["coffee_tokens"] <= 0:
            raise RuleViolation(NO_COFFEE, "No coffee available")
        if state["can_reroll"][role]:
            raise RuleViolation(ALREADY_CAN_REROLL, "You can already reroll")

        state["coffee_tokens"] -= 1
        state["can_reroll"][role] = True
        return Success(f"Coffee drunk! {ROLE_NAMES[role]} can now reroll")

    def _do_reroll_dice(self, state, role, action):
        if not state["can_reroll"][role]:
            raise RuleViolation(NO_REROLL, "You must drink coffee first to reroll!")
        if not unused_dice(state, role):
            raise RuleViolation(NOTHING_TO_REROLL, "No dice left to reroll")

        count = reroll_unused(state, role, self.dice)
        state["can_reroll"][role] = False
        return Success(f"{count} dice rerolled!")

    def _do_end_round(self, state, role, action):
        axis = state["axis"]
        engines = state["engines"]

        if axis["pilot"] is None or axis["copilot"] is None:
            return self._finish(state, STATUS_CONTROLS_MISSING, Failure(
                CONTROLS_MISSING, "GAME OVER: Axes not configured!", game_over=True))
        if engines["pilot"] is None or engines["copilot"] is None:
            return self._finish(state, STATUS_CONTROLS_MISSING, Failure(
                CONTROLS_MISSING, "GAME OVER: Engines not configured!", game_over=True))

        state["plane_orientation"] = orientation_after(
            state["plane_orientation"], axis["pilot"], axis["copilot"])

        engine_sum = engines["pilot"] + engines["copilot"]
        descent = descent_for(engine_sum)
        state["approach_distance"] -= descent

        if state["approach_distance"] <= 0:
            state["approach_distance"] = 0
            state["has_landed"] = True
            return self._evaluate_landing(state, engine_sum, descent)

        if descent == 0:
            return self._finish(state, STATUS_STALLED, Failure(
                STALLED, "GAME OVER: Stalled! No descent.",
                game_over=True, engine_sum=engine_sum, descent=descent))

        finished = state["round"]
        state["round"] += 1
        reset_round(state, self.dice)
        return Success(
            f"Round {finished} complete. Descended {descent}. Starting round {state['round']}",
            engine_sum=engine_sum, descent=descent)

    def _evaluate_landing(self, state, engine_sum, descent):
        issues = landing_issues(state)
        if issues:
            return self._finish(state, STATUS_CRASHED, Failure(
                CRASHED, f"CRASH LANDING! Problems: {', '.join(issues)}",
                game_over=True, engine_sum=engine_sum, descent=descent))

        state["game_won"] = True
        return self._finish(state, STATUS_WON, Success(
            "SUCCESSFUL LANDING! You win!",
            game_over=True, game_won=True, engine_sum=engine_sum, descent=descent))

    # ── Helpers ───────────────────────────────────────────────────────

    def _player_role(self, state, player_id):
        try:
            return ROLES[state["player_ids"].index(player_id)]
        except ValueError:
            raise ValueError(f"Player {player_id} not in this game")

    def _validate_can_act(self, state, role, kind):
        if state["game_over"]:
            raise RuleViolation(GAME_OVER, "Game is over. Reset to fly again.")
        if consumes_turn(kind) and state["current_player"] != role:
            current = ROLE_NAMES[state["current_player"]]
            raise RuleViolation(NOT_YOUR_TURN, f"It is the {current}'s turn")

    def _require_die(self, state, role, die_id):
        die = find_die(state, role, die_id)
        if die is None or die["used"]:
            raise RuleViolation(INVALID_DIE, "Invalid die")
        return die

    def _validate_placement(self, state, role, control, value):
        if control == "radio":
            raise RuleViolation(RADIO_NEEDS_SLOT, "Radio planes are cleared with place_radio and a slot")
        if control not in PLACEABLE_CONTROLS:
            raise RuleViolation(UNKNOWN_CONTROL, f"Unknown control: {control}")

        if control in ("axis", "engines"):
            if state[control][role] is not None:
                raise RuleViolation(SLOT_OCCUPIED, f"{CONTROL_LABELS[control].title()} slot already taken")
            return

        if control == "brakes":
            if role != "pilot":
                raise RuleViolation(WRONG_ROLE, "Only the Pilot can apply the brakes")
            if state["brakes"] is not None:
                raise RuleViolation(SLOT_OCCUPIED, "Brakes already applied")
            return

        owner = TRACK_OWNERS[control]
        if role != owner:
            raise RuleViolation(WRONG_ROLE, f"Only the {ROLE_NAMES[owner]} can deploy the {CONTROL_LABELS[control]}")
        track = state[DEPLOYMENT_TRACKS[control]]
        if track_full(track):
            raise RuleViolation(TRACK_FULL, f"{TRACK_NAMES[control]} fully deployed")
        if not slot_accepts(track, value):
            raise RuleViolation(SLOT_VALUE, describe_slot(len(track)))

    def _passes(self, check, *args):
        try:
            check(*args)
        except RuleViolation:
            return False
        return True

    def _advance_turn(self, state):
        state["current_player"] = other_role(state["current_player"])

    def _finish(self, state, status, outcome):
        state["game_over"] = True
        state["status"] = status
        logger.info("Game over after round %s (%s): %s", state["round"], status, outcome.message)
        return outcome

    def _engine_sum(self, state):
        engines = state["engines"]
        if engines["pilot"] is None or engines["copilot"] is None:
            return None
        return engines["pilot"] + engines["copilot"]
