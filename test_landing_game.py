"""
Tests for the LandingGame facade and full-approach scenarios.
"""

from copy import deepcopy

import pytest

from skyteam.landing.controls import descent_for
from skyteam.landing.dice import RandomDice, ScriptedDice
from skyteam.landing.game import LandingGame
from skyteam.landing.outcomes import (
    Failure, Success, ALREADY_CAN_REROLL, NO_COFFEE, STALLED, WRONG_ROLE,
)
from skyteam.landing.state import START_DISTANCE, ORIENTATION_LIMIT
from skyteam.simulate import APPROACH_PLAN, plan_faces, run_plan, main


# ── Helpers ───────────────────────────────────────────────────────────

def scripted_game(pilot, copilot, *more):
    """Game whose first round rolls exactly these faces."""
    faces = list(pilot) + list(copilot)
    for extra in more:
        faces.extend(extra)
    return LandingGame(dice=ScriptedDice(faces))


def die_with(game, role, value):
    for d in game.state["dice"][role]:
        if not d["used"] and d["value"] == value:
            return d["id"]
    raise AssertionError(f"{role} has no unused {value}")


def fly_basic_round(game, axis=(3, 3), engines=(3, 3)):
    game.place_dice(die_with(game, "pilot", axis[0]), "axis", "pilot")
    game.place_dice(die_with(game, "copilot", axis[1]), "axis", "copilot")
    game.place_dice(die_with(game, "pilot", engines[0]), "engines", "pilot")
    game.place_dice(die_with(game, "copilot", engines[1]), "engines", "copilot")
    return game.end_round()


# ══════════════════════════════════════════════════════════════════════
# Facade Tests
# ══════════════════════════════════════════════════════════════════════

class TestFacade:

    def test_starts_with_rolled_dice(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        state = game.get_state()
        assert [d["value"] for d in state["dice"]["pilot"]] == [1, 2, 3, 4]
        assert state["players"]["pilot"]["name"] == "Pilot"

    def test_snapshot_is_a_copy(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        snapshot = game.get_state()
        snapshot["approach_distance"] = 0
        snapshot["dice"]["pilot"][0]["used"] = True
        assert game.state["approach_distance"] == START_DISTANCE
        assert game.state["dice"]["pilot"][0]["used"] is False

    def test_failure_changes_nothing(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        before = game.get_state()
        outcome = game.place_dice(die_with(game, "pilot", 4), "landing-gear", "pilot")
        assert isinstance(outcome, Failure)
        assert game.get_state() == before

    def test_place_and_toggle(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        outcome = game.place_dice(die_with(game, "pilot", 1), "landing-gear", "pilot")
        assert isinstance(outcome, Success)
        assert game.state["landing_gear"] == [1]
        assert game.state["current_player"] == "copilot"

    def test_roll_dice_replaces_pools(self):
        game = scripted_game((1, 1, 1, 1), (1, 1, 1, 1), (6,) * 8)
        old_ids = {d["id"] for d in game.state["dice"]["pilot"]}
        game.roll_dice()
        pilot = game.state["dice"]["pilot"]
        assert [d["value"] for d in pilot] == [6, 6, 6, 6]
        assert not old_ids & {d["id"] for d in pilot}

    def test_reset(self):
        game = scripted_game((3, 3, 3, 3), (3, 3, 3, 3), (4,) * 8, (2,) * 8)
        fly_basic_round(game)
        game.make_coffee(die_with(game, "pilot", 4), "pilot")
        assert game.state["round"] == 2

        game.reset()
        state = game.get_state()
        assert state["round"] == 1
        assert state["coffee_tokens"] == 0
        assert state["approach_distance"] == START_DISTANCE
        assert [d["value"] for d in state["dice"]["pilot"]] == [2, 2, 2, 2]

    def test_coffee_round_trip(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2), (6, 6))
        assert game.make_coffee(die_with(game, "copilot", 2), "copilot").success
        assert game.make_coffee(die_with(game, "copilot", 1), "copilot").success
        assert game.drink_coffee("pilot").success
        assert game.state["coffee_tokens"] == 1
        outcome = game.drink_coffee("pilot")
        assert outcome.reason == ALREADY_CAN_REROLL

        game.place_dice(die_with(game, "pilot", 1), "axis", "pilot")
        game.place_dice(die_with(game, "copilot", 5), "axis", "copilot")
        game.place_dice(die_with(game, "pilot", 2), "engines", "pilot")
        outcome = game.reroll_dice("pilot")
        assert outcome.success
        assert [d["value"] for d in game.state["dice"]["pilot"]] == [1, 2, 6, 6]
        assert game.state["can_reroll"]["pilot"] is False

    def test_drink_with_empty_pot(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        assert game.make_coffee(die_with(game, "copilot", 2), "copilot").success
        assert game.drink_coffee("pilot").success
        assert game.drink_coffee("pilot").reason == NO_COFFEE

    def test_unknown_role_returns_failure(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2))
        before = game.get_state()
        outcomes = [
            game.place_dice(die_with(game, "pilot", 1), "axis", "captain"),
            game.drink_coffee("navigator"),
            game.reroll_dice("navigator"),
        ]
        for outcome in outcomes:
            assert isinstance(outcome, Failure)
            assert outcome.reason == WRONG_ROLE
        assert game.get_state() == before

    def test_roll_dice_ignores_game_over(self):
        game = scripted_game((1, 1, 1, 1), (1, 1, 1, 1), (5,) * 8)
        game.end_round()
        assert game.state["game_over"] is True
        game.roll_dice()
        assert [d["value"] for d in game.state["dice"]["copilot"]] == [5, 5, 5, 5]
        assert game.state["game_over"] is True
        assert game.state["log"][-1] == "Fresh dice rolled for both crew"

    def test_drink_twice_after_reroll(self):
        game = scripted_game((1, 2, 3, 4), (5, 6, 1, 2), (4, 4, 4, 4))
        game.state["coffee_tokens"] = 2
        assert game.drink_coffee("copilot").success
        assert game.reroll_dice("copilot").success
        assert game.drink_coffee("copilot").success
        assert game.state["coffee_tokens"] == 0


# ══════════════════════════════════════════════════════════════════════
# Scenario Tests
# ══════════════════════════════════════════════════════════════════════

class TestScenarios:

    def test_stall(self):
        game = scripted_game((3, 1, 5, 5), (3, 2, 5, 5))
        outcome = fly_basic_round(game, axis=(3, 3), engines=(1, 2))
        assert outcome.reason == STALLED
        assert outcome.game_over is True
        assert outcome.descent == 0
        assert "Stalled" in outcome.message
        assert game.state["game_over"] is True

    def test_scripted_approach_wins(self):
        lines = []
        game = run_plan(out=lines.append)
        assert game.state["game_won"] is True
        assert game.state["game_over"] is True
        assert game.state["approach_distance"] == 0
        assert game.state["radio_cleared"] == [True, True, True]
        assert lines[-1].startswith("-- SUCCESSFUL LANDING")

    def test_landing_without_brakes_crashes(self):
        plan = deepcopy(APPROACH_PLAN)
        plan[-1]["moves"] = [m for m in plan[-1]["moves"] if m[1] not in ("brakes", "radio")]
        game = run_plan(plan, out=lambda line: None)
        state = game.get_state()
        assert state["game_over"] is True
        assert state["game_won"] is False
        assert state["status"] == "crashed"
        assert "brakes not applied" in state["log"][-1]

    def test_plan_faces_order(self):
        faces = plan_faces(APPROACH_PLAN[:1])
        assert faces == [3, 5, 1, 6, 3, 5, 2, 6]

    def test_simulate_main(self, capsys, monkeypatch):
        monkeypatch.setattr("skyteam.simulate.configure_logging", lambda level: None)
        assert main(["--quiet"]) == 0
        out = capsys.readouterr().out
        assert "SUCCESS" in out
        assert "Round 1 complete" not in out


# ══════════════════════════════════════════════════════════════════════
# Invariant Tests
# ══════════════════════════════════════════════════════════════════════

class TestInvariants:

    @pytest.mark.parametrize("seed", range(12))
    def test_orientation_and_descent_bounds(self, seed):
        """Fly with the widest axis split every round; bounds must hold."""
        game = LandingGame(dice=RandomDice(seed=seed))
        while not game.state["game_over"]:
            pilot = sorted(game.state["dice"]["pilot"], key=lambda d: d["value"])
            copilot = sorted(game.state["dice"]["copilot"], key=lambda d: d["value"])
            before = game.state["approach_distance"]

            assert game.place_dice(pilot[-1]["id"], "axis", "pilot").success
            assert game.place_dice(copilot[0]["id"], "axis", "copilot").success
            assert game.place_dice(pilot[0]["id"], "engines", "pilot").success
            assert game.place_dice(copilot[-1]["id"], "engines", "copilot").success
            engine_sum = pilot[0]["value"] + copilot[-1]["value"]

            outcome = game.end_round()
            after = game.state["approach_distance"]
            assert -ORIENTATION_LIMIT <= game.state["plane_orientation"] <= ORIENTATION_LIMIT
            assert outcome.engine_sum == engine_sum
            assert outcome.descent == descent_for(engine_sum)
            assert after <= before
            assert after == max(0, before - outcome.descent)

    @pytest.mark.parametrize("seed", range(6))
    def test_coffee_stays_in_bounds(self, seed):
        game = LandingGame(dice=RandomDice(seed=seed))
        for role in ("pilot", "copilot"):
            for d in list(game.state["dice"][role]):
                game.make_coffee(d["id"], role)
                assert 0 <= game.state["coffee_tokens"] <= 3
        assert game.state["coffee_tokens"] == 3
        for role in ("pilot", "copilot", "pilot"):
            game.drink_coffee(role)
            assert 0 <= game.state["coffee_tokens"] <= 3
        assert game.state["coffee_tokens"] == 1
