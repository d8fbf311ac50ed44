"""Invite routes.

Caller identity arrives in headers set by the authenticating gateway in
front of this service; it is trusted as given.
"""

import asyncio
import contextlib

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import (
    APIRouter,
    Header,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from nexus.application.usecase.invite import (
    CheckInviteRequest,
    CheckInviteResponse,
    CheckInviteUseCase,
    InviteItem,
    IssueInviteRequest,
    IssueInviteResponse,
    IssueInviteUseCase,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemInviteUseCase,
)
from nexus.domain.error import InviteEngineError
from nexus.domain.service import InviteChangeFeed, Subscription
from nexus.domain.value import IssuerId, IssuerRole

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


def _require(value: str | None, header: str) -> str:
    if not value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Not authenticated: missing {header}",
        )
    return value


@router.post(
    "", response_model=IssueInviteResponse, status_code=status.HTTP_201_CREATED
)
async def issue_invite(
    issue_invite_use_case: FromDishka[IssueInviteUseCase],
    issuer_id: str | None = Header(default=None, alias="X-Issuer-Id"),
    issuer_role: IssuerRole = Header(
        default=IssuerRole.ORDINARY, alias="X-Issuer-Role"
    ),
) -> IssueInviteResponse:
    """Issue a new invite code for the caller.

    Raises:
        HTTPException: If the caller identity is missing
    """
    request = IssueInviteRequest(
        issuer_id=_require(issuer_id, "X-Issuer-Id"),
        is_privileged=issuer_role == IssuerRole.PRIVILEGED,
    )
    return await issue_invite_use_case.execute(request)


@router.get("", response_model=ListInvitesResponse)
async def list_invites(
    list_invites_use_case: FromDishka[ListInvitesUseCase],
    issuer_id: str | None = Header(default=None, alias="X-Issuer-Id"),
    limit: int | None = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> ListInvitesResponse:
    """List the caller's invites, newest first.

    Raises:
        HTTPException: If the caller identity is missing
    """
    request = ListInvitesRequest(
        issuer_id=_require(issuer_id, "X-Issuer-Id"),
        limit=limit,
        offset=offset,
    )
    return await list_invites_use_case.execute(request)


@router.get("/{code}", response_model=CheckInviteResponse)
async def check_invite(
    code: str,
    check_invite_use_case: FromDishka[CheckInviteUseCase],
) -> CheckInviteResponse:
    """Check whether a code can be redeemed, without using it."""
    return await check_invite_use_case.execute(CheckInviteRequest(code=code))


@router.post("/{code}/redeem", response_model=RedeemInviteResponse)
async def redeem_invite(
    code: str,
    redeem_invite_use_case: FromDishka[RedeemInviteUseCase],
    account_id: str | None = Header(default=None, alias="X-Account-Id"),
) -> RedeemInviteResponse:
    """Redeem a code for the registering account.

    Raises:
        HTTPException: If the account identity is missing
    """
    request = RedeemInviteRequest(
        code=code, account_id=_require(account_id, "X-Account-Id")
    )
    return await redeem_invite_use_case.execute(request)


async def _close_on_disconnect(
    websocket: WebSocket, subscription: Subscription
) -> None:
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        subscription.close()


@router.websocket("/feed")
async def invite_feed(
    websocket: WebSocket,
    issuer_id: str | None = Header(default=None, alias="X-Issuer-Id"),
) -> None:
    """Stream the caller's invite history.

    Sends the current history first, then one message per committed
    change. Messages are invite items; a code may be sent more than once
    and clients should upsert by code.
    """
    if not issuer_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    # WebSocket routes bypass DishkaRoute; use the app container directly
    container = websocket.app.state.dishka_container
    change_feed = await container.get(InviteChangeFeed)

    await websocket.accept()
    async with change_feed.subscribe(IssuerId(issuer_id)) as subscription:
        watcher = asyncio.create_task(_close_on_disconnect(websocket, subscription))
        try:
            async for invite in subscription:
                item = InviteItem.from_invite(invite)
                await websocket.send_json(item.model_dump(mode="json"))
        except WebSocketDisconnect:
            logfire.info("Feed client disconnected", issuer_id=issuer_id)
        except InviteEngineError as e:
            logfire.error("Feed failed", issuer_id=issuer_id, error=e.message)
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        finally:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher
