# groupchat/infrastructure/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from groupchat.domain.colors import Color


class CamelModel(BaseModel):
    # Stored records and HTTP payloads share the camelCase field names used
    # by existing deployments.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class User(BaseModel):
    id: str
    name: str | None = None


class GroupChat(CamelModel):
    id: str
    name: str = ""
    creator_id: str
    members: list[str] = Field(default_factory=list)
    created_at: int
    archived: bool | None = None
    archived_at: int | None = None
    transition_date: int | str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, raw: str) -> "GroupChat":
        return cls.model_validate_json(raw)


class GroupChatCreate(CamelModel):
    name: str
    member_ids: list[str]


class JoinResult(BaseModel):
    id: str


class ColorAssignment(CamelModel):
    user_id: str
    color: Color


class VerifiedColorAssignment(ColorAssignment):
    verified: bool


class NewGroupChatSummary(CamelModel):
    chat_id: str
    members: list[str]
    color_assignments: list[ColorAssignment]


class TransitionRequest(CamelModel):
    transition_date: int | str | None = None
    algorithm_output: list[list[str]] | None = None


class TransitionResult(CamelModel):
    success: bool
    message: str
    group_chats: list[NewGroupChatSummary]
    current_user_chat_id: str | None
    previous_chat_id: str | None
    transition_date: int | str | None = None
    all_users_verified: bool


class TransitionRecord(CamelModel):
    timestamp: int
    admin_user_id: str
    admin_user_name: str
    group_chat_count: int
    transition_date: int | str | None = None


class TransitionChatSummary(CamelModel):
    chat_id: str
    member_count: int


class TransitionHistoryEntry(TransitionRecord):
    group_chats: list[TransitionChatSummary]


class LastTransition(BaseModel):
    transition: TransitionRecord | None = None
    error: str | None = None


class CurrentGroupChat(BaseModel):
    id: str | None = None
    data: GroupChat | None = None
    error: str | None = None


class ChatExists(CamelModel):
    exists: bool
    chat_id: str | None = None
    error: str | None = None


class UpdateCurrentRequest(CamelModel):
    user_id: str
    chat_id: str


class AssignColorsRequest(CamelModel):
    chat_id: str


class AssignColorsResult(CamelModel):
    success: bool
    chat_id: str
    color_assignments: list[VerifiedColorAssignment]


class Ranking(CamelModel):
    user_id: str
    position: int


class RankingsResponse(BaseModel):
    rankings: list[Ranking]


class SaveRankingsRequest(CamelModel):
    chat_id: str
    rankings: list[Ranking]


class SuccessResponse(BaseModel):
    success: bool
    message: str


class GlobalNotificationRequest(BaseModel):
    type: str = Field(..., min_length=1)
    message: str | None = None
