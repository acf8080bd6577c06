"""
Group API Routes

Create a group and join one with its code.
"""

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from santa_api.dependencies import get_current_identity
from santa_api.dependencies import get_orchestrator
from santa_api.routes.converters import to_group_response
from santa_api.schemas.schemas import CreateGroupRequest
from santa_api.schemas.schemas import GroupCreatedResponse
from santa_api.schemas.schemas import JoinGroupRequest
from santa_api.workflow.models import Identity
from santa_api.workflow.orchestrator import ExchangeOrchestrator

ROUTER_GROUP = APIRouter(tags=["Group"], prefix="/group")


@ROUTER_GROUP.post(
    "/create",
    response_model=GroupCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group owned by the caller",
    responses={
        201: {"description": "Group created; share the join code with participants"},
        409: {"description": "Caller already owns a group with this name"},
    },
)
async def create_group(
    body: CreateGroupRequest,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    group = await orchestrator.create_group(identity, body.name)
    return GroupCreatedResponse(Message="Group created", Group=to_group_response(group))


@ROUTER_GROUP.post(
    "/join",
    response_model=GroupCreatedResponse,
    summary="Join a group with its join code",
    responses={
        404: {"description": "Invalid join code"},
        409: {"description": "Already a member"},
    },
)
async def join_group(
    body: JoinGroupRequest,
    identity: Identity = Depends(get_current_identity),
    orchestrator: ExchangeOrchestrator = Depends(get_orchestrator),
):
    group = await orchestrator.join_group(identity, body.join_code)
    return GroupCreatedResponse(Message="Joined group", Group=to_group_response(group))
