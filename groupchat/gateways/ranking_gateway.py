# groupchat/gateways/ranking_gateway.py
import json
from typing import List

from pydantic import TypeAdapter

from groupchat.gateways import keys
from groupchat.gateways.interfaces import IRankingGateway
from groupchat.infrastructure import schemas
from groupchat.infrastructure.redis_client import RedisClient

_rankings_adapter = TypeAdapter(List[schemas.Ranking])


class RankingGateway(IRankingGateway):
    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    async def get_rankings(self, chat_id: str, user_id: str) -> List[schemas.Ranking]:
        raw = await self.redis.get(keys.rankings_key(chat_id, user_id))
        if not raw:
            return []
        return _rankings_adapter.validate_json(raw)

    async def save_rankings(
        self, chat_id: str, user_id: str, rankings: List[schemas.Ranking]
    ) -> None:
        # Full overwrite; members referenced here are not re-validated.
        payload = json.dumps([ranking.model_dump(by_alias=True) for ranking in rankings])
        await self.redis.set(keys.rankings_key(chat_id, user_id), payload)
