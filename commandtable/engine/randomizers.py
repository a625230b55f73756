"""Coin flips and dice. Results are logged and kept for display; no history."""

from __future__ import annotations

from typing import TYPE_CHECKING

from commandtable.engine.game_log import now_ms
from commandtable.models.game import RandomResult, RandomResultType
from commandtable.models.log import LogActionType

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

PLANESWALK = "Planeswalk"
CHAOS = "Chaos"
BLANK = "Blank"


class Randomizers:
    def __init__(self, session: GameSession) -> None:
        self._session = session

    def _publish(self, result_type: RandomResultType, value: str | int, label: str) -> RandomResult:
        result = RandomResult(type=result_type, value=value, label=label, timestamp=now_ms())
        self._session.last_random_result = result
        self._session.log.add(LogActionType.OTHER, label)
        return result

    def flip_coin(self) -> RandomResult:
        result = "Heads" if self._session.rng.random() < 0.5 else "Tails"
        return self._publish(RandomResultType.COIN, result, f"Coin flip: {result}")

    def roll_die(self, sides: int) -> RandomResult:
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        result = self._session.rng.randint(1, sides)
        return self._publish(RandomResultType.DIE, result, f"Rolled D{sides}: {result}")

    def roll_double_dice(self) -> RandomResult:
        first = self._session.rng.randint(1, 6)
        second = self._session.rng.randint(1, 6)
        total = first + second
        return self._publish(
            RandomResultType.DIE, total, f"Rolled 2×D6: {first}+{second}={total}"
        )

    def roll_planar_die(self) -> RandomResult:
        """One planeswalk face, one chaos face, four blanks."""
        roll = self._session.rng.random()
        if roll < 1 / 6:
            result = PLANESWALK
        elif roll < 2 / 6:
            result = CHAOS
        else:
            result = BLANK
        return self._publish(RandomResultType.PLANAR, result, f"Planar die: {result}")

    def clear_result(self) -> None:
        self._session.last_random_result = None
