# groupchat/domain/events.py
from typing import Any

from pydantic import BaseModel


class Event(BaseModel):
    pass


class Initiator(BaseModel):
    id: str
    name: str


class NewGroupChat(Event):
    user_id: str
    chat: dict[str, Any]


class GroupChatUpdate(Event):
    event_type: str
    timestamp: int
    message: str
    initiated_by: Initiator
    transition_date: int | str | None = None


class GlobalNotification(Event):
    type: str
    message: str
    timestamp: int
    sender: Initiator
