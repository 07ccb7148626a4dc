# groupchat/gateways/interfaces.py
from abc import ABC, abstractmethod
from typing import List, Optional, Set

from groupchat.domain.colors import Color
from groupchat.infrastructure import schemas


class IGroupChatGateway(ABC):
    @abstractmethod
    async def get_chat(self, chat_id: str) -> Optional[schemas.GroupChat]:
        pass

    @abstractmethod
    async def put_chat(self, chat: schemas.GroupChat) -> None:
        pass

    @abstractmethod
    async def archive_chat(
        self, chat: schemas.GroupChat, archived_at: int
    ) -> schemas.GroupChat:
        pass

    @abstractmethod
    async def delete_chat_keys(self, chat_id: str, keep_rankings: bool = True) -> int:
        pass

    @abstractmethod
    async def append_member(
        self, chat_id: str, user_id: str, capacity: int, retries: int
    ) -> Optional[schemas.GroupChat]:
        pass

    @abstractmethod
    async def get_current_chat(self, user_id: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set_current_chat(self, user_id: str, chat_id: str) -> None:
        pass

    @abstractmethod
    async def clear_current_chat(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def add_to_available(self, chat_id: str) -> None:
        pass

    @abstractmethod
    async def remove_from_available(self, chat_id: str) -> None:
        pass

    @abstractmethod
    async def list_available(self) -> Set[str]:
        pass

    @abstractmethod
    async def clear_available(self) -> None:
        pass

    @abstractmethod
    async def get_color(self, chat_id: str, user_id: str) -> Optional[Color]:
        pass

    @abstractmethod
    async def set_color(self, chat_id: str, user_id: str, color: Color) -> None:
        pass

    @abstractmethod
    async def add_membership_index(self, user_id: str, chat_id: str) -> None:
        pass

    @abstractmethod
    async def list_membership_index(self, user_id: str) -> Set[str]:
        pass

    @abstractmethod
    async def clear_membership_index(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def register_user(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def list_all_user_ids(self) -> Set[str]:
        pass

    @abstractmethod
    async def list_all_group_chat_ids(self) -> Set[str]:
        pass

    @abstractmethod
    async def count_ranking_keys(self, chat_id: str) -> int:
        pass


class IRankingGateway(ABC):
    @abstractmethod
    async def get_rankings(self, chat_id: str, user_id: str) -> List[schemas.Ranking]:
        pass

    @abstractmethod
    async def save_rankings(
        self, chat_id: str, user_id: str, rankings: List[schemas.Ranking]
    ) -> None:
        pass


class ITransitionGateway(ABC):
    @abstractmethod
    async def save_last_transition(self, record: schemas.TransitionRecord) -> None:
        pass

    @abstractmethod
    async def get_last_transition(self) -> Optional[schemas.TransitionRecord]:
        pass

    @abstractmethod
    async def save_history_entry(self, entry: schemas.TransitionHistoryEntry) -> None:
        pass
