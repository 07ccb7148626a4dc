# groupchat/tests/unit/test_event_handlers.py
import json
from unittest.mock import AsyncMock

import pytest

from groupchat.domain.events import (
    GlobalNotification,
    GroupChatUpdate,
    Initiator,
    NewGroupChat,
)
from groupchat.infrastructure.event_handlers import EventHandlers


@pytest.fixture
def mock_redis_client():
    return AsyncMock()


@pytest.fixture
def event_handlers(mock_redis_client):
    return EventHandlers(mock_redis_client)


def published(mock_redis_client):
    mock_redis_client.publish.assert_called_once()
    channel, message = mock_redis_client.publish.call_args[0]
    return channel, json.loads(message)


@pytest.mark.asyncio
async def test_publish_new_group_chat(event_handlers, mock_redis_client):
    event = NewGroupChat(user_id="u1", chat={"id": "group_abc"})
    await event_handlers.publish_new_group_chat(event)

    channel, message = published(mock_redis_client)
    assert channel == "user:u1:group_chats"
    assert message == {"event": "new_group_chat", "data": {"id": "group_abc"}}


@pytest.mark.asyncio
async def test_publish_group_chat_update(event_handlers, mock_redis_client):
    event = GroupChatUpdate(
        event_type="rebuild",
        timestamp=1700000000000,
        message="Group chats are transitioning to new sets",
        initiated_by=Initiator(id="admin", name="Admin"),
        transition_date=1700000500000,
    )
    await event_handlers.publish_group_chat_update(event)

    channel, message = published(mock_redis_client)
    assert channel == "global_notifications"
    assert message["event"] == "group_chat_update"
    assert message["data"] == {
        "eventType": "rebuild",
        "timestamp": 1700000000000,
        "message": "Group chats are transitioning to new sets",
        "initiatedBy": {"id": "admin", "name": "Admin"},
        "transitionDate": 1700000500000,
    }


@pytest.mark.asyncio
async def test_publish_global_notification_uses_type_as_event_name(
    event_handlers, mock_redis_client
):
    event = GlobalNotification(
        type="group_chat_transition_started",
        message="Heads up",
        timestamp=1,
        sender=Initiator(id="admin", name="Admin"),
    )
    await event_handlers.publish_global_notification(event)

    channel, message = published(mock_redis_client)
    assert channel == "global_notifications"
    assert message["event"] == "group_chat_transition_started"
    assert message["data"]["sender"] == {"id": "admin", "name": "Admin"}
