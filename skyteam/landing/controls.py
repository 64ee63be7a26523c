"""
Cockpit control rules for the landing game.

Deployment tracks, the radio track, the speed table and landing readiness.
Pure functions over the state dict; nothing here mutates.
"""

from skyteam.landing.state import ORIENTATION_LIMIT

# ── Deployment Tracks ────────────────────────────────────────────────

# Landing gear (pilot) and flaps (copilot) fill left to right; each slot
# only takes one of its two faces.
DEPLOYMENT_SLOTS = ((1, 2), (3, 4), (5, 6))
DEPLOYMENT_TRACKS = {"landing-gear": "landing_gear", "flaps": "flaps"}
TRACK_OWNERS = {"landing-gear": "pilot", "flaps": "copilot"}
TRACK_NAMES = {"landing-gear": "Landing gear", "flaps": "Flaps"}


def track_full(track):
    return len(track) >= len(DEPLOYMENT_SLOTS)


def slot_accepts(track, value):
    """Can this value go in the next open slot of the track?"""
    if track_full(track):
        return False
    return value in DEPLOYMENT_SLOTS[len(track)]


def describe_slot(slot_index):
    low, high = DEPLOYMENT_SLOTS[slot_index]
    return f"Slot {slot_index + 1} requires {low} or {high}"


# ── Radio Track ──────────────────────────────────────────────────────

def radio_accepts(state, slot_index, value):
    """Radio slots are independent: only the exact face matters."""
    return not state["radio_cleared"][slot_index] and state["radio_planes"][slot_index] == value


# ── Speed Table ──────────────────────────────────────────────────────

# Four display zones; the two fastest zones descend at the same rate,
# so a round never descends more than 2.
SPEED_ZONES = ((1, 3), (4, 6), (7, 9), (10, 12))
DESCENT_BY_ZONE = (0, 1, 2, 2)


def speed_zone(engine_sum):
    """Return the display zone index for an engine sum."""
    for index, (low, high) in enumerate(SPEED_ZONES):
        if low <= engine_sum <= high:
            return index
    if engine_sum < SPEED_ZONES[0][0]:
        return 0
    return len(SPEED_ZONES) - 1


def descent_for(engine_sum):
    return DESCENT_BY_ZONE[speed_zone(engine_sum)]


def speed_markers(state):
    """
    Positions of the min/max markers on the speed table.
    Each deployed gear step nudges min right; each flap step nudges max right.
    Display only: descent ignores them.
    """
    return {
        "min": 4 + len(state["landing_gear"]),
        "max": 10 + len(state["flaps"]),
    }


# ── Orientation ──────────────────────────────────────────────────────

def orientation_after(orientation, axis_pilot, axis_copilot):
    """Tilt one step toward whichever side placed the higher axis die."""
    diff = axis_pilot - axis_copilot
    step = (diff > 0) - (diff < 0)
    return max(-ORIENTATION_LIMIT, min(ORIENTATION_LIMIT, orientation + step))


# ── Landing Readiness ────────────────────────────────────────────────

def landing_issues(state):
    """Every reason the touchdown is not clean. Empty list means a win."""
    issues = []
    if state["plane_orientation"] != 0:
        issues.append("not level")
    if not track_full(state["landing_gear"]):
        issues.append("gear not fully deployed")
    if not track_full(state["flaps"]):
        issues.append("flaps not fully deployed")
    if state["brakes"] is None:
        issues.append("brakes not applied")
    return issues
