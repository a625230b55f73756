"""
Targeting mode for drag-to-attach gestures.

A two-state union: either nothing is being targeted, or one source card
is waiting for its target. An "inactive mode with a source" cannot be
represented.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Idle:
    """No targeting in progress."""


@dataclass(frozen=True, slots=True)
class Targeting:
    """A source card is waiting for the player to pick a target."""

    source_card_id: str


TargetingMode = Idle | Targeting

IDLE = Idle()
