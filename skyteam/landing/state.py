"""
Constants and state helpers for the landing game.

Dice pools, initial state creation, round reset and the turn predicate.
"""

# ── Rule Constants ────────────────────────────────────────────────────

ROLES = ("pilot", "copilot")
ROLE_NAMES = {"pilot": "Pilot", "copilot": "Copilot"}

DICE_PER_ROLE = 4
START_DISTANCE = 7
ORIENTATION_LIMIT = 3
MAX_COFFEE = 3
RADIO_PLANES = (2, 4, 6)

# Actions that hand the turn to the other role when they succeed.
# Coffee and reroll are cooperative side-actions and never do.
TURN_CONSUMING_ACTIONS = frozenset({"place_dice", "place_radio"})

STATUS_IN_ROUND = "in_round"
STATUS_WON = "won"
STATUS_CRASHED = "crashed"
STATUS_STALLED = "stalled"
STATUS_CONTROLS_MISSING = "controls_missing"


def consumes_turn(kind):
    """Does a successful action of this kind pass the turn?"""
    return kind in TURN_CONSUMING_ACTIONS


def other_role(role):
    return "copilot" if role == "pilot" else "pilot"


# ── Dice Pools ───────────────────────────────────────────────────────

def create_die(state, role, value):
    """Build a die with a game-unique id."""
    state["next_die_id"] += 1
    return {"id": f"{role}-{state['next_die_id']}", "value": value, "used": False}


def roll_dice(state, dice):
    """Replace both pools with freshly rolled dice."""
    for role in ROLES:
        state["dice"][role] = [create_die(state, role, dice.roll()) for _ in range(DICE_PER_ROLE)]


def reroll_unused(state, role, dice):
    """Re-roll every unused die of one role. Returns how many changed hands."""
    count = 0
    for die in state["dice"][role]:
        if not die["used"]:
            die["value"] = dice.roll()
            count += 1
    return count


def find_die(state, role, die_id):
    """Return the role's die with this id, or None."""
    for die in state["dice"][role]:
        if die["id"] == die_id:
            return die
    return None


def unused_dice(state, role):
    return [d for d in state["dice"][role] if not d["used"]]


# ── State Creation ───────────────────────────────────────────────────

def create_player(role, player_id, name):
    return {"role": role, "player_id": player_id, "name": name}


def create_initial_state(player_ids, player_names, dice):
    """
    Build a fresh game. The first player flies as pilot, the second as copilot.
    Dice for round 1 are rolled immediately.
    """
    players = {
        role: create_player(role, pid, name)
        for role, pid, name in zip(ROLES, player_ids, player_names)
    }

    state = {
        "game": "landing",
        "player_ids": list(player_ids),
        "players": players,
        "round": 1,
        "current_player": "pilot",
        "approach_distance": START_DISTANCE,
        "plane_orientation": 0,
        "has_landed": False,
        "game_over": False,
        "game_won": False,
        "status": STATUS_IN_ROUND,
        "next_die_id": 0,
        "dice": {"pilot": [], "copilot": []},
        "axis": {"pilot": None, "copilot": None},
        "engines": {"pilot": None, "copilot": None},
        "brakes": None,
        "landing_gear": [],
        "flaps": [],
        "coffee_tokens": 0,
        "max_coffee": MAX_COFFEE,
        "can_reroll": {"pilot": False, "copilot": False},
        "radio_planes": list(RADIO_PLANES),
        "radio_cleared": [False] * len(RADIO_PLANES),
        "log": [],
    }
    roll_dice(state, dice)
    return state


def reset_round(state, dice):
    """
    Clear round-scoped fields and roll the next round's dice.
    Distance, orientation, tracks, brakes, coffee and radio carry over.
    """
    state["current_player"] = "pilot"
    state["axis"] = {"pilot": None, "copilot": None}
    state["engines"] = {"pilot": None, "copilot": None}
    state["can_reroll"] = {"pilot": False, "copilot": False}
    roll_dice(state, dice)
