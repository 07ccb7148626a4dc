# groupchat/infrastructure/event_handlers.py
import json
from typing import Any

from groupchat.domain.events import GlobalNotification, GroupChatUpdate, NewGroupChat

GLOBAL_CHANNEL = "global_notifications"


def user_group_chats_channel(user_id: str) -> str:
    return f"user:{user_id}:group_chats"


class EventHandlers:
    def __init__(self, redis_client):
        self.redis_client = redis_client

    async def publish_event(
        self, channel_name: str, event_name: str, data: dict[str, Any]
    ):
        message_json = json.dumps({"event": event_name, "data": data}, default=str)
        await self.redis_client.publish(channel_name, message_json)

    async def publish_new_group_chat(self, event: NewGroupChat):
        await self.publish_event(
            user_group_chats_channel(event.user_id), "new_group_chat", event.chat
        )

    async def publish_group_chat_update(self, event: GroupChatUpdate):
        await self.publish_event(
            GLOBAL_CHANNEL,
            "group_chat_update",
            {
                "eventType": event.event_type,
                "timestamp": event.timestamp,
                "message": event.message,
                "initiatedBy": event.initiated_by.model_dump(),
                "transitionDate": event.transition_date,
            },
        )

    async def publish_global_notification(self, event: GlobalNotification):
        await self.publish_event(
            GLOBAL_CHANNEL,
            event.type,
            {
                "message": event.message,
                "timestamp": event.timestamp,
                "sender": event.sender.model_dump(),
            },
        )
