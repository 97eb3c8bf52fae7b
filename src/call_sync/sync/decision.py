"""Create-vs-update decision state machine for one call record.

decide() is pure and maps (existing contact?, success?) to one WriteAction:

    existing  success   action
    yes       yes       full_update
    yes       no        partial_update (last unsuccessful contact only)
    no        yes       create
    no        no        create_unanswered, or skip under the ignore policy

execute() performs exactly one CRM write for the action (none for skip) and
remembers the id of a newly created contact.
"""

from __future__ import annotations

import structlog

from src.call_sync.config import UnansweredPolicy
from src.call_sync.crm.adapter import CRMAdapter
from src.call_sync.sync.classifier import DEFAULT_STATUS_LABEL
from src.call_sync.sync.identity import IdentityResolver
from src.call_sync.sync.schemas import (
    ActionKind,
    CallContext,
    Classification,
    ContactProperties,
    WriteAction,
)

logger = structlog.get_logger(__name__)

NOT_ANSWERED_LABEL = "Não atendida"


class SyncDecisionEngine:
    """Chooses and executes the CRM write for a classified call.

    Args:
        crm: CRM adapter that receives the writes.
        resolver: Identity resolver; created contacts are remembered in it.
        unanswered_policy: What to do for an unanswered call from an unknown number.
        default_label: Status label written on unanswered creates.
        not_answered_label: Sentinel for the recording link and success
            timestamp of unanswered creates.
    """

    def __init__(
        self,
        crm: CRMAdapter,
        resolver: IdentityResolver,
        unanswered_policy: UnansweredPolicy = UnansweredPolicy.create,
        default_label: str = DEFAULT_STATUS_LABEL,
        not_answered_label: str = NOT_ANSWERED_LABEL,
    ) -> None:
        self._crm = crm
        self._resolver = resolver
        self._unanswered_policy = unanswered_policy
        self._default_label = default_label
        self._not_answered_label = not_answered_label

    def decide(
        self,
        existing_contact_id: str | None,
        classification: Classification,
        context: CallContext,
    ) -> WriteAction:
        if existing_contact_id is not None:
            if classification.is_success:
                properties = ContactProperties(
                    status_label=classification.status_label,
                    recording_link=context.recording_url,
                    contacted=True,
                    last_success_at=context.contact_timestamp,
                )
                if not context.name.is_generic:
                    properties.first_name = context.name.value
                return WriteAction(
                    kind=ActionKind.FULL_UPDATE,
                    phone=context.phone,
                    contact_id=existing_contact_id,
                    properties=properties,
                )
            return WriteAction(
                kind=ActionKind.PARTIAL_UPDATE,
                phone=context.phone,
                contact_id=existing_contact_id,
                properties=ContactProperties(last_failure_at=context.contact_timestamp),
            )

        if classification.is_success:
            return WriteAction(
                kind=ActionKind.CREATE,
                phone=context.phone,
                properties=ContactProperties(
                    phone=context.phone,
                    first_name=context.name.value,
                    status_label=classification.status_label,
                    recording_link=context.recording_url,
                    contacted=True,
                    last_success_at=context.contact_timestamp,
                ),
            )

        if self._unanswered_policy == UnansweredPolicy.ignore:
            return WriteAction(kind=ActionKind.SKIP, phone=context.phone)

        return WriteAction(
            kind=ActionKind.CREATE_UNANSWERED,
            phone=context.phone,
            properties=ContactProperties(
                phone=context.phone,
                first_name=context.name.value,
                status_label=self._default_label,
                recording_link=self._not_answered_label,
                contacted=False,
                last_success_at=self._not_answered_label,
                last_failure_at=context.contact_timestamp,
            ),
        )

    async def execute(self, action: WriteAction) -> str | None:
        """Apply the action to the CRM, return the affected contact id."""
        if action.kind == ActionKind.SKIP:
            return None

        if action.kind in (ActionKind.FULL_UPDATE, ActionKind.PARTIAL_UPDATE):
            await self._crm.update_contact(action.contact_id, action.properties)
            return action.contact_id

        contact_id = await self._crm.create_contact(action.properties)
        self._resolver.remember(action.phone, contact_id)
        return contact_id
