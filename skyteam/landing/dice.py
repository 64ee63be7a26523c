"""
Dice sources.

The engine never calls the random module directly; it asks a dice source
for each face. RandomDice is the normal source, ScriptedDice replays a
fixed sequence for tests and scripted runs.
"""

import random
from collections import deque

DIE_FACES = 6


class RandomDice:
    """Uniform six-sided dice."""

    def __init__(self, seed=None):
        self._rng = random.Random(seed)

    def roll(self):
        return self._rng.randint(1, DIE_FACES)


class ScriptedDice:
    """
    Hand out faces from a fixed sequence, in order.

    Rolls happen pilot pool first, then copilot pool, four dice each.
    Rerolls take one face per unused die, in pool order.
    """

    def __init__(self, faces=()):
        self._faces = deque()
        self.extend(faces)

    def extend(self, faces):
        for face in faces:
            if isinstance(face, bool) or not isinstance(face, int) or not 1 <= face <= DIE_FACES:
                raise ValueError(f"Die face must be 1-{DIE_FACES}, got {face}")
            self._faces.append(face)

    def remaining(self):
        return len(self._faces)

    def roll(self):
        if not self._faces:
            raise LookupError("Scripted dice ran out of faces")
        return self._faces.popleft()
