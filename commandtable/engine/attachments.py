"""
Attachment controller.

Attaches Equipment, Auras and Fortifications to other cards and runs the
targeting state machine behind drag-to-target:

    Idle --start_targeting(source)--> Targeting(source)
    Targeting --complete_targeting(target)--> attach(source, target) --> Idle
    any --cancel_targeting()--> Idle

INVARIANT: attachment links are symmetric. A.attached_to_id == B.id
exactly when A.id is in B.attachment_ids.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from commandtable.models.instance import CardInstance
from commandtable.models.log import LogActionType
from commandtable.models.targeting import IDLE, Targeting

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession

logger = logging.getLogger(__name__)


class AttachmentController:
    def __init__(self, session: GameSession) -> None:
        self._session = session

    def _unlink(self, card: CardInstance) -> None:
        """Remove a card from its parent's attachment list and clear its back-reference."""
        if card.attached_to_id is None:
            return
        parent = self._session.find_card(card.attached_to_id)
        if parent is not None and card.id in parent.attachment_ids:
            parent.attachment_ids.remove(card.id)
        card.attached_to_id = None

    def attach_card(self, source_id: str, target_id: str) -> None:
        """
        Attach source to target.

        Only Equipment, Auras and Fortifications can be attached. A source
        that is already attached elsewhere is moved. The source joins the
        target's zone untapped.
        """
        session = self._session
        if not session.is_editable or source_id == target_id:
            return

        source = session.find_card(source_id)
        target = session.find_card(target_id)
        if source is None or target is None:
            return

        if not source.card.is_attachment:
            logger.debug(
                "attach_rejected_not_attachable",
                extra={"card_id": source_id, "type_line": source.card.type_line},
            )
            return

        session.history.record()

        self._unlink(source)
        source.attached_to_id = target.id
        source.zone = target.zone
        source.is_tapped = False
        if source.id not in target.attachment_ids:
            target.attachment_ids.append(source.id)

        session.log.add(LogActionType.OTHER, f'Attached "{source.name}" to "{target.name}"')
        session.commit()

    def detach_card(self, card_id: str) -> None:
        """Unattach a card, leaving it where it is."""
        session = self._session
        if not session.is_editable:
            return

        card = session.find_card(card_id)
        if card is None or card.attached_to_id is None:
            return

        session.history.record()
        self._unlink(card)
        session.log.add(LogActionType.OTHER, f'Detached "{card.name}"')
        session.commit()

    # =========================================================================
    # TARGETING
    # =========================================================================

    def start_targeting(self, source_card_id: str) -> None:
        self._session.targeting = Targeting(source_card_id=source_card_id)

    def cancel_targeting(self) -> None:
        self._session.targeting = IDLE

    def complete_targeting(self, target_id: str) -> None:
        """Commit the pending attachment. Ignored unless targeting is active."""
        mode = self._session.targeting
        if not isinstance(mode, Targeting):
            return

        self.attach_card(mode.source_card_id, target_id)
        self.cancel_targeting()
