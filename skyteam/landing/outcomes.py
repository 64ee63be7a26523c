"""
Action outcomes for the landing engine.

Every operation answers with either a Success or a Failure. A Failure
carries a reason code so callers can branch on it without parsing text.
"""

from dataclasses import dataclass, asdict
from typing import Union

# ── Reason Codes ─────────────────────────────────────────────────────

# Recoverable: the state is left exactly as it was
GAME_OVER = "game_over"
NOT_YOUR_TURN = "not_your_turn"
INVALID_DIE = "invalid_die"
UNKNOWN_CONTROL = "unknown_control"
WRONG_ROLE = "wrong_role"
SLOT_OCCUPIED = "slot_occupied"
TRACK_FULL = "track_full"
SLOT_VALUE = "slot_value"
RADIO_NEEDS_SLOT = "radio_needs_slot"
INVALID_SLOT = "invalid_slot"
ALREADY_CLEARED = "already_cleared"
RADIO_VALUE = "radio_value"
COFFEE_FULL = "coffee_full"
NO_COFFEE = "no_coffee"
ALREADY_CAN_REROLL = "already_can_reroll"
NO_REROLL = "no_reroll"
NOTHING_TO_REROLL = "nothing_to_reroll"

# Terminal: the game is over once one of these is returned
CONTROLS_MISSING = "controls_missing"
STALLED = "stalled"
CRASHED = "crashed"

TERMINAL_REASONS = (CONTROLS_MISSING, STALLED, CRASHED)


class RuleViolation(ValueError):
    """A rejected action. The engine never mutates state when raising this."""

    def __init__(self, reason, message):
        super().__init__(message)
        self.reason = reason
        self.message = message


@dataclass(frozen=True)
class Success:
    message: str
    game_over: bool = False
    game_won: bool = False
    engine_sum: int | None = None
    descent: int | None = None

    success = True

    def to_dict(self):
        out = asdict(self)
        out["success"] = True
        return out


@dataclass(frozen=True)
class Failure:
    reason: str
    message: str
    game_over: bool = False
    game_won: bool = False
    engine_sum: int | None = None
    descent: int | None = None

    success = False

    @property
    def terminal(self):
        return self.reason in TERMINAL_REASONS

    def to_dict(self):
        out = asdict(self)
        out["success"] = False
        return out


Outcome = Union[Success, Failure]


def rejected(violation: RuleViolation) -> Failure:
    return Failure(
        reason=violation.reason,
        message=violation.message,
        game_over=violation.reason == GAME_OVER,
    )
