# groupchat/gateways/keys.py
import secrets

GROUP_CHAT_PREFIX = "group_"
AVAILABLE_GROUP_CHATS = "available_group_chats"
LAST_TRANSITION = "last_group_chat_transition"
GROUP_CHAT_IDS = "group_chat_ids"
USER_IDS = "user_ids"


def new_group_chat_id() -> str:
    return GROUP_CHAT_PREFIX + secrets.token_urlsafe(16)[:21]


def is_group_chat_id(chat_id: str) -> bool:
    return chat_id.startswith(GROUP_CHAT_PREFIX)


def chat_key(chat_id: str) -> str:
    return f"chat:{chat_id}"


def color_key(chat_id: str, user_id: str) -> str:
    return f"chat:{chat_id}:user:{user_id}:color"


def rankings_key(chat_id: str, user_id: str) -> str:
    return f"chat:{chat_id}:user:{user_id}:rankings"


def current_group_chat_key(user_id: str) -> str:
    return f"user:{user_id}:current_group_chat"


def user_group_chats_key(user_id: str) -> str:
    return f"user:{user_id}:group_chats"


def archive_chat_key(chat_id: str) -> str:
    return f"archive:chat:{chat_id}"


def transition_history_key(timestamp: int) -> str:
    return f"group_chat_transition:{timestamp}"
