"""
Admin API Routes

Shuffle, approvals, group progress and participant lists. Every endpoint requires the ADMIN role.
"""

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from santa_api.dependencies import get_orchestrator
from santa_api.dependencies import require_admin
from santa_api.routes.converters import to_approval_response
from santa_api.routes.converters import to_group_response
from santa_api.routes.converters import to_group_status_response
from santa_api.routes.converters import to_participant_item
from santa_api.schemas.schemas import ApprovalResponse
from santa_api.schemas.schemas import GroupListResponse
from santa_api.schemas.schemas import GroupStatusResponse
from santa_api.schemas.schemas import ParticipantListResponse
from santa_api.schemas.schemas import ShuffleResponse
from santa_api.workflow.models import Identity
from santa_api.workflow.orchestrator import ExchangeOrchestrator

ROUTER_ADMIN = APIRouter(tags=["Admin"], prefix="/admin")


@ROUTER_ADMIN.post(
    "/shuffle/{group_id}",
    response_model=ShuffleResponse,
    summary="Pair every member with a recipient",
    responses={
        400: {"description": "Fewer than 2 members"},
        404: {"description": "Group not found"},
    },
)
async def shuffle(
    group_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    """Replaces any previous pairing for the group."""
    result = await orchestrator.shuffle(identity, group_id)
    return ShuffleResponse(
        Message="Shuffle complete",
        GroupId=result.group_id,
        EventId=result.event_id,
        MemberCount=result.member_count,
        MappingsInserted=result.mappings_inserted,
    )


@ROUTER_ADMIN.post(
    "/approve-wish/{group_id}/{user_id}",
    response_model=ApprovalResponse,
    summary="Approve a pending wish",
    responses={404: {"description": "Wish not found"}, 409: {"description": "Wish already approved"}},
)
async def approve_wish(
    group_id: str,
    user_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    result = await orchestrator.approve_wish(identity, group_id, user_id)
    return to_approval_response("Wish approved", result)


@ROUTER_ADMIN.post(
    "/approve-address/{group_id}/{user_id}",
    response_model=ApprovalResponse,
    summary="Approve a pending address and email the recipient's santas",
    responses={404: {"description": "Address not found"}, 409: {"description": "Address already approved"}},
)
async def approve_address(
    group_id: str,
    user_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    """The response reports delivery counts only; the wish and address go to the santas by email."""
    result = await orchestrator.approve_address(identity, group_id, user_id)
    return to_approval_response("Address approved", result)


@ROUTER_ADMIN.post(
    "/reject-wish/{group_id}/{user_id}",
    status_code=status.HTTP_501_NOT_IMPLEMENTED,
    summary="Reject a wish (not supported)",
)
async def reject_wish(
    group_id: str,
    user_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.reject_wish(identity, group_id, user_id)


@ROUTER_ADMIN.post(
    "/reject-address/{group_id}/{user_id}",
    status_code=status.HTTP_501_NOT_IMPLEMENTED,
    summary="Reject an address (not supported)",
)
async def reject_address(
    group_id: str,
    user_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.reject_address(identity, group_id, user_id)


@ROUTER_ADMIN.get("/groups", response_model=GroupListResponse, summary="List every group")
async def list_groups(
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    groups = await orchestrator.list_all_groups(identity)
    return GroupListResponse(
        Message=f"Found {len(groups)} group(s)",
        Count=len(groups),
        Groups=[to_group_response(g) for g in groups],
    )


@ROUTER_ADMIN.get(
    "/group-status/{group_id}",
    response_model=GroupStatusResponse,
    summary="Pairings, approval statuses and acknowledgements for a group",
    responses={404: {"description": "Group not found"}},
)
async def group_status(
    group_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    result = await orchestrator.group_status(identity, group_id)
    return to_group_status_response(result)


@ROUTER_ADMIN.get(
    "/participants/{group_id}",
    response_model=ParticipantListResponse,
    summary="Members of a group with their submission status",
    responses={404: {"description": "Group not found"}},
)
async def list_participants(
    group_id: str,
    identity: Identity = Depends(require_admin),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    participants = await orchestrator.list_participants(identity, group_id)
    return ParticipantListResponse(
        Message=f"Found {len(participants)} participant(s)",
        GroupId=group_id,
        Count=len(participants),
        Participants=[to_participant_item(p) for p in participants],
    )
