# groupchat/interactors/ranking_interactor.py
from typing import List

from groupchat.gateways.interfaces import IGroupChatGateway, IRankingGateway
from groupchat.infrastructure import schemas
from groupchat.interactors.group_chat_interactor import load_member_chat


class RankingInteractor:
    def __init__(
        self, ranking_gateway: IRankingGateway, group_chat_gateway: IGroupChatGateway
    ):
        self.ranking_gateway = ranking_gateway
        self.group_chat_gateway = group_chat_gateway

    async def get_rankings(self, chat_id: str, user_id: str) -> List[schemas.Ranking]:
        await load_member_chat(
            self.group_chat_gateway, chat_id, user_id, allow_archived=True
        )
        return await self.ranking_gateway.get_rankings(chat_id, user_id)

    async def save_rankings(
        self, chat_id: str, user_id: str, rankings: List[schemas.Ranking]
    ) -> None:
        await load_member_chat(
            self.group_chat_gateway, chat_id, user_id, allow_archived=True
        )
        await self.ranking_gateway.save_rankings(chat_id, user_id, rankings)
