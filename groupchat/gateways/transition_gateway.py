# groupchat/gateways/transition_gateway.py
from typing import Optional

from groupchat.gateways import keys
from groupchat.gateways.interfaces import ITransitionGateway
from groupchat.infrastructure import schemas
from groupchat.infrastructure.redis_client import RedisClient


class TransitionGateway(ITransitionGateway):
    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    async def save_last_transition(self, record: schemas.TransitionRecord) -> None:
        await self.redis.set(
            keys.LAST_TRANSITION, record.model_dump_json(by_alias=True)
        )

    async def get_last_transition(self) -> Optional[schemas.TransitionRecord]:
        raw = await self.redis.get(keys.LAST_TRANSITION)
        if not raw:
            return None
        return schemas.TransitionRecord.model_validate_json(raw)

    async def save_history_entry(self, entry: schemas.TransitionHistoryEntry) -> None:
        await self.redis.set(
            keys.transition_history_key(entry.timestamp),
            entry.model_dump_json(by_alias=True),
        )
