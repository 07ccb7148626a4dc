# groupchat/api/group_chats.py

from fastapi import APIRouter, Depends, HTTPException, Query

from groupchat.api.dependencies import (
    get_authorization_policy,
    get_current_user,
    get_group_chat_interactor,
    get_transition_interactor,
)
from groupchat.infrastructure import schemas
from groupchat.infrastructure.security import AuthorizationPolicy
from groupchat.interactors.group_chat_interactor import GroupChatInteractor
from groupchat.interactors.transition_interactor import (
    TransitionInteractor,
    TransitionMode,
)

router = APIRouter()


@router.post(
    "/create", response_model=schemas.GroupChat, response_model_exclude_none=True
)
async def create_group_chat(
    chat: schemas.GroupChatCreate,
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await group_chat_interactor.create_group_chat(chat, current_user.id)


@router.post("/join", response_model=schemas.JoinResult)
async def join_group_chat(
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    chat_id = await group_chat_interactor.join_or_create(current_user.id)
    return schemas.JoinResult(id=chat_id)


@router.get(
    "/list", response_model=list[schemas.GroupChat], response_model_exclude_none=True
)
async def list_group_chats(
    user_id: str | None = Query(None, alias="userId"),
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    if not user_id:
        raise HTTPException(status_code=400, detail="User ID is required")
    if user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Can only list your own group chats")
    return await group_chat_interactor.list_group_chats(user_id)


@router.post("/rebuild", response_model=schemas.TransitionResult)
async def rebuild_group_chats(
    transition_interactor: TransitionInteractor = Depends(get_transition_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await transition_interactor.transition(
        current_user, mode=TransitionMode.REBUILD
    )


@router.post("/transition", response_model=schemas.TransitionResult)
async def transition_group_chats(
    request: schemas.TransitionRequest | None = None,
    transition_interactor: TransitionInteractor = Depends(get_transition_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    request = request or schemas.TransitionRequest()
    return await transition_interactor.transition(
        current_user,
        transition_date=request.transition_date,
        external_partition=request.algorithm_output,
        mode=TransitionMode.TRANSITION,
    )


@router.get(
    "/current",
    response_model=schemas.CurrentGroupChat,
    response_model_exclude_none=True,
)
async def read_current_group_chat(
    user_id: str | None = Query(None, alias="userId"),
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    authorization_policy: AuthorizationPolicy = Depends(get_authorization_policy),
    current_user: schemas.User = Depends(get_current_user),
):
    user_id = user_id or current_user.id
    if user_id != current_user.id and not authorization_policy.can_initiate_transition(
        current_user.id
    ):
        raise HTTPException(
            status_code=403, detail="Only admins can read another user's group chat"
        )
    return await group_chat_interactor.get_current(user_id)


@router.get("/check", response_model=schemas.ChatExists)
async def check_group_chat(
    chat_id: str | None = Query(None, alias="chatId"),
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await group_chat_interactor.check(chat_id)


@router.post("/update-current", response_model=schemas.SuccessResponse)
async def update_current_group_chat(
    update: schemas.UpdateCurrentRequest,
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    await group_chat_interactor.update_current(
        current_user.id, update.user_id, update.chat_id
    )
    return schemas.SuccessResponse(
        success=True, message="Current group chat updated successfully"
    )


@router.post("/assign-colors", response_model=schemas.AssignColorsResult)
async def assign_colors(
    request: schemas.AssignColorsRequest,
    group_chat_interactor: GroupChatInteractor = Depends(get_group_chat_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await group_chat_interactor.assign_colors(request.chat_id, current_user.id)


@router.get("/last-transition", response_model=schemas.LastTransition)
async def read_last_transition(
    transition_interactor: TransitionInteractor = Depends(get_transition_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await transition_interactor.last_transition()
