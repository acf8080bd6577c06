"""Workflow model -> PascalCase response conversion."""

from santa_api.schemas.schemas import AcknowledgementStatusItem
from santa_api.schemas.schemas import AddressStatusResponseItem
from santa_api.schemas.schemas import ApprovalResponse
from santa_api.schemas.schemas import GroupResponse
from santa_api.schemas.schemas import GroupStatusResponse
from santa_api.schemas.schemas import MappingStatusItem
from santa_api.schemas.schemas import ParticipantItem
from santa_api.schemas.schemas import WishStatusResponseItem
from santa_api.workflow.models import ApprovalResult
from santa_api.workflow.models import Group
from santa_api.workflow.models import GroupStatus
from santa_api.workflow.models import ParticipantSummary


def to_group_response(group: Group) -> GroupResponse:
    return GroupResponse(
        GroupId=group.group_id,
        Name=group.name,
        OwnerId=group.owner_id,
        JoinCode=group.join_code,
        CreatedAt=group.created_at,
    )


def to_approval_response(message: str, result: ApprovalResult) -> ApprovalResponse:
    return ApprovalResponse(
        Message=message,
        GroupId=result.group_id,
        UserId=result.user_id,
        ApprovedAt=result.approved_at,
        SantasNotified=result.santas_notified,
        NotificationsFailed=result.notifications_failed,
    )


def to_group_status_response(group_status: GroupStatus) -> GroupStatusResponse:
    return GroupStatusResponse(
        GroupId=group_status.group_id,
        EventId=group_status.event_id,
        Mappings=[
            MappingStatusItem(
                SantaId=m.santa_id,
                SantaEmail=m.santa_email,
                RecipientId=m.recipient_id,
                RecipientEmail=m.recipient_email,
                EventId=m.event_id,
            )
            for m in group_status.mappings
        ],
        Wishes=[
            WishStatusResponseItem(
                UserId=w.user_id,
                UserEmail=w.user_email,
                Status=w.status.value,
                WishSetAt=w.wish_set_at,
                ApprovedAt=w.approved_at,
            )
            for w in group_status.wishes
        ],
        Addresses=[
            AddressStatusResponseItem(
                UserId=a.user_id,
                UserEmail=a.user_email,
                Status=a.status.value,
                SubmittedAt=a.submitted_at,
                ApprovedAt=a.approved_at,
            )
            for a in group_status.addresses
        ],
        Acknowledgements=[
            AcknowledgementStatusItem(SantaId=a.santa_id, SantaEmail=a.santa_email, SentAt=a.sent_at)
            for a in group_status.acknowledgements
        ],
    )


def to_participant_item(participant: ParticipantSummary) -> ParticipantItem:
    return ParticipantItem(
        UserId=participant.user_id,
        Name=participant.display_name,
        Email=participant.email,
        Submitted=participant.submitted,
        AddressStatus=participant.address_status.value,
    )
