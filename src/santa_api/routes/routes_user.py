"""
Participant API Routes

Recipient side (wish, address) and santa side (assignment, acknowledgement)
of the exchange, plus the caller's group list.
"""

from fastapi import APIRouter
from fastapi import Depends

from santa_api.dependencies import get_current_identity
from santa_api.dependencies import get_orchestrator
from santa_api.routes.converters import to_group_response
from santa_api.schemas.schemas import AcknowledgementResponse
from santa_api.schemas.schemas import AssignmentResponse
from santa_api.schemas.schemas import GroupListResponse
from santa_api.schemas.schemas import MessageResponse
from santa_api.schemas.schemas import SetWishRequest
from santa_api.schemas.schemas import SubmitAddressRequest
from santa_api.workflow.models import Identity
from santa_api.workflow.orchestrator import ExchangeOrchestrator

ROUTER_USER = APIRouter(tags=["User"], prefix="/user")


@ROUTER_USER.get("/my-groups", response_model=GroupListResponse, summary="Groups the caller belongs to")
async def my_groups(
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    groups = await orchestrator.list_my_groups(identity)
    return GroupListResponse(
        Message=f"Found {len(groups)} group(s)",
        Count=len(groups),
        Groups=[to_group_response(g) for g in groups],
    )


@ROUTER_USER.post(
    "/set-wish/{group_id}",
    response_model=MessageResponse,
    summary="Submit or replace the caller's wish",
    responses={
        403: {"description": "Caller is not a recipient in this group"},
        409: {"description": "Wish already approved"},
    },
)
async def set_wish(
    group_id: str,
    body: SetWishRequest,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.submit_wish(identity, group_id, body.wish)
    return MessageResponse(Message="Wish submitted for approval")


@ROUTER_USER.post(
    "/submit-address/{group_id}",
    response_model=MessageResponse,
    summary="Submit or replace the caller's shipping address",
    responses={
        403: {"description": "Wish not approved yet, or caller not in group"},
        409: {"description": "Address already approved"},
    },
)
async def submit_address(
    group_id: str,
    body: SubmitAddressRequest,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.submit_address(identity, group_id, body.address)
    return MessageResponse(Message="Address submitted for approval")


@ROUTER_USER.get(
    "/my-assignment/{group_id}",
    response_model=AssignmentResponse,
    summary="Wish and address of the caller's recipient",
    responses={
        404: {"description": "Caller has no assignment in this group"},
        409: {"description": "Recipient wish/address not approved yet"},
    },
)
async def my_assignment(
    group_id: str,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    disclosure = await orchestrator.get_assignment(identity, group_id)
    return AssignmentResponse(
        Wish=disclosure.wish,
        Address=disclosure.address,
        RecipientNameHidden=disclosure.recipient_name_hidden,
    )


@ROUTER_USER.post(
    "/acknowledge/{group_id}",
    response_model=AcknowledgementResponse,
    summary="Mark the caller's gift as sent",
    responses={
        403: {"description": "Caller is not a santa in this group"},
        409: {"description": "Gift already acknowledged"},
    },
)
async def acknowledge(
    group_id: str,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    ack = await orchestrator.acknowledge(identity, group_id)
    return AcknowledgementResponse(Message="Gift marked as sent", SentAt=ack.sent_at)
