# groupchat/interactors/group_chat_interactor.py
import logging
from typing import List

from groupchat.domain.colors import assign_color
from groupchat.domain.events import NewGroupChat
from groupchat.domain.exceptions import (
    ForbiddenError,
    InvalidRequestError,
    NotFoundError,
    StoreError,
)
from groupchat.domain.timestamps import now_ms
from groupchat.gateways.interfaces import IGroupChatGateway
from groupchat.gateways.keys import is_group_chat_id, new_group_chat_id
from groupchat.infrastructure import schemas
from groupchat.infrastructure.event_dispatcher import EventDispatcher


async def load_member_chat(
    gateway: IGroupChatGateway,
    chat_id: str,
    user_id: str,
    allow_archived: bool = False,
) -> schemas.GroupChat:
    """Fetch a group chat, insisting that ``user_id`` is one of its members.

    Archived chats count as missing unless ``allow_archived`` is set.
    """
    if not is_group_chat_id(chat_id):
        raise InvalidRequestError("This endpoint only works for group chats")
    chat = await gateway.get_chat(chat_id)
    if chat is None or (chat.archived and not allow_archived):
        raise NotFoundError("Chat not found")
    if user_id not in chat.members:
        raise ForbiddenError("You are not a member of this chat")
    return chat


class GroupChatInteractor:
    def __init__(
        self,
        group_chat_gateway: IGroupChatGateway,
        event_dispatcher: EventDispatcher,
        logger: logging.Logger,
        capacity: int = 5,
        join_retries: int = 5,
    ):
        self.group_chat_gateway = group_chat_gateway
        self.event_dispatcher = event_dispatcher
        self.logger = logger
        self.capacity = capacity
        self.join_retries = join_retries

    async def join_or_create(self, user_id: str) -> str:
        current_chat_id = await self.group_chat_gateway.get_current_chat(user_id)
        if current_chat_id:
            self.logger.info(f"User {user_id} already has group chat {current_chat_id}")
            return current_chat_id

        chat = await self._join_available(user_id)
        if chat is None:
            chat = await self._create_for(user_id)

        await self.group_chat_gateway.set_current_chat(user_id, chat.id)
        await self.group_chat_gateway.add_membership_index(user_id, chat.id)
        await self.group_chat_gateway.register_user(user_id)

        await self.event_dispatcher.dispatch(
            NewGroupChat(user_id=user_id, chat={"id": chat.id})
        )
        return chat.id

    async def _join_available(self, user_id: str) -> schemas.GroupChat | None:
        available = await self.group_chat_gateway.list_available()
        self.logger.info(f"Found {len(available)} available group chats")

        for chat_id in sorted(available):
            chat = await self.group_chat_gateway.append_member(
                chat_id, user_id, self.capacity, self.join_retries
            )
            if chat is not None:
                self.logger.info(
                    f"User {user_id} joined {chat_id} as member "
                    f"#{len(chat.members)} of {self.capacity}"
                )
                return chat
            # stale entry: missing, archived or already full
            self.logger.warning(f"Dropping unavailable chat {chat_id} from available set")
            await self.group_chat_gateway.remove_from_available(chat_id)
        return None

    async def _create_for(self, user_id: str) -> schemas.GroupChat:
        chat = schemas.GroupChat(
            id=new_group_chat_id(),
            name="",
            creator_id=user_id,
            members=[user_id],
            created_at=now_ms(),
        )
        self.logger.info(f"Creating new group chat {chat.id} for {user_id}")
        await self.group_chat_gateway.set_color(chat.id, user_id, assign_color(0))
        await self.group_chat_gateway.put_chat(chat)
        if len(chat.members) < self.capacity:
            await self.group_chat_gateway.add_to_available(chat.id)
        return chat

    async def create_group_chat(
        self, chat_create: schemas.GroupChatCreate, creator_id: str
    ) -> schemas.GroupChat:
        members = list(dict.fromkeys(chat_create.member_ids))
        if creator_id not in members:
            members.append(creator_id)
        if len(members) > self.capacity:
            raise InvalidRequestError(
                f"A group chat can have at most {self.capacity} members"
            )

        chat = schemas.GroupChat(
            id=new_group_chat_id(),
            name=chat_create.name,
            creator_id=creator_id,
            members=members,
            created_at=now_ms(),
        )
        await self.group_chat_gateway.put_chat(chat)
        for index, member_id in enumerate(members):
            await self.group_chat_gateway.set_color(
                chat.id, member_id, assign_color(index)
            )
            await self.group_chat_gateway.add_membership_index(member_id, chat.id)
        # member ids come from the request; only the caller is a known user
        await self.group_chat_gateway.register_user(creator_id)
        if len(members) < self.capacity:
            await self.group_chat_gateway.add_to_available(chat.id)

        payload = chat.model_dump(by_alias=True, exclude_none=True)
        for member_id in members:
            await self.event_dispatcher.dispatch(
                NewGroupChat(user_id=member_id, chat=payload)
            )
        return chat

    async def get_current(self, user_id: str) -> schemas.CurrentGroupChat:
        try:
            chat_id = await self.group_chat_gateway.get_current_chat(user_id)
            if not chat_id:
                return schemas.CurrentGroupChat(error="No current group chat found")

            chat = await self.group_chat_gateway.get_chat(chat_id)
        except StoreError as e:
            self.logger.error(f"Store error while reading current chat of {user_id}: {e.detail}")
            return schemas.CurrentGroupChat(error="Database error")

        if chat is None:
            return schemas.CurrentGroupChat(error="Chat data not found")
        if chat.archived:
            return schemas.CurrentGroupChat(error="Chat is archived")
        if user_id not in chat.members:
            return schemas.CurrentGroupChat(error="User is not a member of this chat")
        return schemas.CurrentGroupChat(id=chat_id, data=chat)

    async def check(self, chat_id: str | None) -> schemas.ChatExists:
        if not chat_id:
            return schemas.ChatExists(exists=False, error="No chat ID provided")
        try:
            exists = await self.group_chat_gateway.get_chat(chat_id) is not None
        except StoreError as e:
            self.logger.error(f"Error checking chat existence for {chat_id}: {e.detail}")
            exists = False
        return schemas.ChatExists(exists=exists, chat_id=chat_id)

    async def update_current(
        self, session_user_id: str, user_id: str, chat_id: str
    ) -> None:
        if user_id != session_user_id:
            raise ForbiddenError("Can only update your own current group chat")
        if not is_group_chat_id(chat_id):
            raise InvalidRequestError("Invalid request data")

        chat = await self.group_chat_gateway.get_chat(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found")
        if user_id not in chat.members:
            raise ForbiddenError("User is not a member of this chat")

        await self.group_chat_gateway.set_current_chat(user_id, chat_id)
        self.logger.info(f"Updated current group chat for user {user_id} to {chat_id}")

    async def assign_colors(
        self, chat_id: str, requester_id: str
    ) -> schemas.AssignColorsResult:
        chat = await load_member_chat(self.group_chat_gateway, chat_id, requester_id)

        assignments = []
        for index, member_id in enumerate(chat.members):
            color = assign_color(index)
            await self.group_chat_gateway.set_color(chat_id, member_id, color)
            stored = await self.group_chat_gateway.get_color(chat_id, member_id)
            assignments.append(
                schemas.VerifiedColorAssignment(
                    user_id=member_id, color=color, verified=stored == color
                )
            )
        return schemas.AssignColorsResult(
            success=True, chat_id=chat_id, color_assignments=assignments
        )

    async def list_group_chats(self, user_id: str) -> List[schemas.GroupChat]:
        chat_ids = await self.group_chat_gateway.list_membership_index(user_id)
        chats = []
        for chat_id in sorted(chat_ids):
            chat = await self.group_chat_gateway.get_chat(chat_id)
            if chat is not None:
                chats.append(chat)
        return chats
