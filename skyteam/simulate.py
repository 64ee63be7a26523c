"""
Scripted approach that flies a clean five-round landing.

Every face is pre-loaded into ScriptedDice, so the run is deterministic.
Used as a smoke check that the rules allow a win:

    python -m skyteam.simulate [--log-level DEBUG] [--quiet]
"""

import argparse
import logging
import sys

from skyteam.config import load_settings, configure_logging
from skyteam.landing.dice import ScriptedDice
from skyteam.landing.game import LandingGame
from skyteam.landing.state import ROLES

logger = logging.getLogger(__name__)

# Each round: the faces rolled for each role, then the moves in play order.
# A move is (role, target, face); target is a control, "radio" or "coffee".
APPROACH_PLAN = [
    {
        "pilot": (3, 5, 1, 6),
        "copilot": (3, 5, 2, 6),
        "moves": [
            ("pilot", "axis", 3), ("copilot", "axis", 3),
            ("pilot", "engines", 5), ("copilot", "engines", 5),
            ("pilot", "landing-gear", 1), ("copilot", "flaps", 2),
            ("pilot", "coffee", 6), ("copilot", "coffee", 6),
        ],
    },
    {
        "pilot": (4, 4, 3, 1),
        "copilot": (4, 4, 4, 1),
        "moves": [
            ("pilot", "axis", 4), ("copilot", "axis", 4),
            ("pilot", "engines", 4), ("copilot", "engines", 4),
            ("pilot", "landing-gear", 3), ("copilot", "flaps", 4),
        ],
    },
    {
        "pilot": (2, 2, 5, 3),
        "copilot": (2, 3, 6, 3),
        "moves": [
            ("pilot", "axis", 2), ("copilot", "axis", 2),
            ("pilot", "engines", 2), ("copilot", "engines", 3),
            ("pilot", "landing-gear", 5), ("copilot", "flaps", 6),
        ],
    },
    {
        "pilot": (5, 2, 2, 1),
        "copilot": (5, 2, 4, 1),
        "moves": [
            ("pilot", "axis", 5), ("copilot", "axis", 5),
            ("pilot", "engines", 2), ("copilot", "engines", 2),
            ("pilot", "radio", 2), ("copilot", "radio", 4),
        ],
    },
    {
        "pilot": (1, 3, 2, 4),
        "copilot": (1, 2, 6, 4),
        "moves": [
            ("pilot", "axis", 1), ("copilot", "axis", 1),
            ("pilot", "engines", 3), ("copilot", "engines", 2),
            ("pilot", "brakes", 2), ("copilot", "radio", 6),
        ],
    },
]


def plan_faces(plan):
    """Flatten the plan's rolls into the order the engine draws them."""
    faces = []
    for round_plan in plan:
        for role in ROLES:
            faces.extend(round_plan[role])
    return faces


def play_move(game, role, target, face):
    die = next(
        (d for d in game.state["dice"][role] if not d["used"] and d["value"] == face),
        None,
    )
    if die is None:
        raise RuntimeError(f"{role} has no unused {face} for {target}")

    if target == "radio":
        slot_index = game.state["radio_planes"].index(face)
        return game.place_radio(die["id"], role, slot_index)
    if target == "coffee":
        return game.make_coffee(die["id"], role)
    return game.place_dice(die["id"], target, role)


def run_plan(plan=APPROACH_PLAN, out=print):
    """Fly the plan. Returns the game; stops early on any rejected move."""
    game = LandingGame(dice=ScriptedDice(plan_faces(plan)))

    for round_plan in plan:
        for role, target, face in round_plan["moves"]:
            outcome = play_move(game, role, target, face)
            out(f"  {outcome.message}")
            if not outcome.success:
                return game
        outcome = game.end_round()
        out(f"-- {outcome.message} (distance {game.state['approach_distance']})")
        if game.state["game_over"]:
            break

    return game


def parse_args(argv=None, settings=None):
    settings = settings or load_settings()
    parser = argparse.ArgumentParser(description="Fly the scripted landing approach")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    parser.add_argument("--quiet", action="store_true", help="Only print the final verdict")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level.upper())
    logger.info("Flying %d-round scripted approach", len(APPROACH_PLAN))

    game = run_plan(out=(lambda line: None) if args.quiet else print)
    if game.state["game_won"]:
        print("SUCCESS: approach flown and landed")
        return 0
    print("FAILURE: the scripted approach did not end in a win")
    return 1


if __name__ == "__main__":
    sys.exit(main())
