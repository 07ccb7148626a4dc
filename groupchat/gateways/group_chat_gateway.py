# groupchat/gateways/group_chat_gateway.py
import logging
from typing import Optional, Set

from pydantic import ValidationError
from redis.exceptions import WatchError

from groupchat.domain.colors import Color, assign_color
from groupchat.domain.exceptions import StoreError
from groupchat.gateways import keys
from groupchat.gateways.interfaces import IGroupChatGateway
from groupchat.infrastructure import schemas
from groupchat.infrastructure.redis_client import RedisClient, store_errors


class GroupChatGateway(IGroupChatGateway):
    def __init__(self, redis_client: RedisClient, logger: logging.Logger):
        self.redis = redis_client
        self.logger = logger

    def _parse_chat(self, chat_id: str, raw: Optional[str]) -> Optional[schemas.GroupChat]:
        if raw is None:
            return None
        try:
            return schemas.GroupChat.from_json(raw)
        except ValidationError as e:
            self.logger.error(f"Corrupt group chat record {chat_id}: {e!s}")
            return None

    async def get_chat(self, chat_id: str) -> Optional[schemas.GroupChat]:
        raw = await self.redis.get(keys.chat_key(chat_id))
        return self._parse_chat(chat_id, raw)

    async def put_chat(self, chat: schemas.GroupChat) -> None:
        await self.redis.set(keys.chat_key(chat.id), chat.to_json())
        await self.redis.sadd(keys.GROUP_CHAT_IDS, chat.id)

    async def archive_chat(
        self, chat: schemas.GroupChat, archived_at: int
    ) -> schemas.GroupChat:
        archived = chat.model_copy(update={"archived": True, "archived_at": archived_at})
        payload = archived.to_json()
        await self.redis.set(keys.chat_key(chat.id), payload)
        await self.redis.set(keys.archive_chat_key(chat.id), payload)
        return archived

    async def delete_chat_keys(self, chat_id: str, keep_rankings: bool = True) -> int:
        related = await self.redis.keys(f"{keys.chat_key(chat_id)}:*")
        if keep_rankings:
            related = [key for key in related if not key.endswith(":rankings")]
        deleted = await self.redis.delete(keys.chat_key(chat_id), *related)
        await self.redis.srem(keys.GROUP_CHAT_IDS, chat_id)
        await self.redis.srem(keys.AVAILABLE_GROUP_CHATS, chat_id)
        return deleted

    async def append_member(
        self, chat_id: str, user_id: str, capacity: int, retries: int
    ) -> Optional[schemas.GroupChat]:
        """Append ``user_id`` to an open chat under a WATCH on its record.

        The member list, the new member's color and the availability entry
        are written in one MULTI/EXEC, so two concurrent joiners can never
        both take the last seat. Returns None when the chat cannot accept
        the user (missing, archived or full).
        """
        chat_key = keys.chat_key(chat_id)
        with store_errors("append member"):
            for attempt in range(retries):
                async with self.redis.pipeline() as pipe:
                    try:
                        await pipe.watch(chat_key)
                        chat = self._parse_chat(chat_id, await pipe.get(chat_key))
                        if chat is None or chat.archived:
                            return None
                        if user_id in chat.members:
                            return chat
                        if len(chat.members) >= capacity:
                            return None

                        chat.members.append(user_id)
                        color = assign_color(len(chat.members) - 1)

                        pipe.multi()
                        pipe.set(chat_key, chat.to_json())
                        pipe.set(keys.color_key(chat_id, user_id), color.value)
                        if len(chat.members) >= capacity:
                            pipe.srem(keys.AVAILABLE_GROUP_CHATS, chat_id)
                        await pipe.execute()
                        return chat
                    except WatchError:
                        self.logger.debug(
                            f"Chat {chat_id} changed during join, retry {attempt + 1}"
                        )
        raise StoreError(
            f"Could not join chat {chat_id} after {retries} conflicting attempts"
        )

    async def get_current_chat(self, user_id: str) -> Optional[str]:
        return await self.redis.get(keys.current_group_chat_key(user_id))

    async def set_current_chat(self, user_id: str, chat_id: str) -> None:
        await self.redis.set(keys.current_group_chat_key(user_id), chat_id)

    async def clear_current_chat(self, user_id: str) -> None:
        await self.redis.delete(keys.current_group_chat_key(user_id))

    async def add_to_available(self, chat_id: str) -> None:
        await self.redis.sadd(keys.AVAILABLE_GROUP_CHATS, chat_id)

    async def remove_from_available(self, chat_id: str) -> None:
        await self.redis.srem(keys.AVAILABLE_GROUP_CHATS, chat_id)

    async def list_available(self) -> Set[str]:
        return await self.redis.smembers(keys.AVAILABLE_GROUP_CHATS)

    async def clear_available(self) -> None:
        await self.redis.delete(keys.AVAILABLE_GROUP_CHATS)

    async def get_color(self, chat_id: str, user_id: str) -> Optional[Color]:
        raw = await self.redis.get(keys.color_key(chat_id, user_id))
        if raw is None:
            return None
        try:
            return Color(raw)
        except ValueError:
            self.logger.error(f"Unknown color {raw!r} for {user_id} in {chat_id}")
            return None

    async def set_color(self, chat_id: str, user_id: str, color: Color) -> None:
        await self.redis.set(keys.color_key(chat_id, user_id), color.value)

    async def add_membership_index(self, user_id: str, chat_id: str) -> None:
        await self.redis.sadd(keys.user_group_chats_key(user_id), chat_id)

    async def list_membership_index(self, user_id: str) -> Set[str]:
        return await self.redis.smembers(keys.user_group_chats_key(user_id))

    async def clear_membership_index(self, user_id: str) -> None:
        await self.redis.delete(keys.user_group_chats_key(user_id))

    async def register_user(self, user_id: str) -> None:
        await self.redis.sadd(keys.USER_IDS, user_id)

    async def list_all_user_ids(self) -> Set[str]:
        user_ids = await self.redis.smembers(keys.USER_IDS)
        # User records written by the auth service are plain ``user:{id}``
        # keys; pointer and index keys have more segments.
        for key in await self.redis.keys("user:*"):
            parts = key.split(":")
            if len(parts) == 2 and parts[1]:
                user_ids.add(parts[1])
        return user_ids

    async def list_all_group_chat_ids(self) -> Set[str]:
        chat_ids = await self.redis.smembers(keys.GROUP_CHAT_IDS)
        for key in await self.redis.keys(f"chat:{keys.GROUP_CHAT_PREFIX}*"):
            parts = key.split(":")
            if len(parts) == 2:
                chat_ids.add(parts[1])
        return chat_ids

    async def count_ranking_keys(self, chat_id: str) -> int:
        return len(await self.redis.keys(f"{keys.chat_key(chat_id)}:user:*:rankings"))
