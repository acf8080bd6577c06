"""
Group Status

Builds the admin views of a group: progress and the participant list.
Only identifiers, names, emails, statuses and timestamps are included.
"""

from typing import List

from santa_api.workflow.db.store import WorkflowStore
from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.models import AcknowledgementItem
from santa_api.workflow.models import AddressStatusItem
from santa_api.workflow.models import GroupStatus
from santa_api.workflow.models import MappingStatus
from santa_api.workflow.models import ParticipantSummary
from santa_api.workflow.models import WishStatusItem


async def build_group_status(store: WorkflowStore, group_id: str, event_id: str) -> GroupStatus:
    emails = {m.user_id: m.email for m in await store.list_members(group_id)}

    mappings = [
        MappingStatus(
            santa_id=m.santa_id,
            recipient_id=m.recipient_id,
            santa_email=emails.get(m.santa_id),
            recipient_email=emails.get(m.recipient_id),
            event_id=m.event_id,
        )
        for m in await store.list_mappings(group_id, event_id)
    ]

    wishes = [
        WishStatusItem(
            user_id=w.user_id,
            user_email=emails.get(w.user_id),
            status=w.status,
            wish_set_at=w.wish_set_at,
            approved_at=w.approved_at,
        )
        for w in await store.list_wishes(group_id)
    ]

    addresses = [
        AddressStatusItem(
            user_id=p.user_id,
            user_email=emails.get(p.user_id),
            status=p.address_status,
            submitted_at=p.address_submitted_at,
            approved_at=p.address_approved_at,
        )
        for p in await store.list_participations(group_id)
        if p.address_status != AddressStatus.NONE
    ]

    acknowledgements = [
        AcknowledgementItem(santa_id=a.santa_id, santa_email=emails.get(a.santa_id), sent_at=a.sent_at)
        for a in await store.list_acknowledgements(group_id)
    ]

    return GroupStatus(
        group_id=group_id,
        event_id=event_id,
        mappings=mappings,
        wishes=wishes,
        addresses=addresses,
        acknowledgements=acknowledgements,
    )


async def build_participant_list(store: WorkflowStore, group_id: str) -> List[ParticipantSummary]:
    """One row per member, in join order. Members without a participation report NONE."""
    participations = {p.user_id: p for p in await store.list_participations(group_id)}

    summaries = []
    for member in await store.list_members(group_id):
        participation = participations.get(member.user_id)
        summaries.append(
            ParticipantSummary(
                user_id=member.user_id,
                display_name=member.display_name,
                email=member.email,
                submitted=bool(participation and participation.submitted),
                address_status=participation.address_status if participation else AddressStatus.NONE,
            )
        )
    return summaries
