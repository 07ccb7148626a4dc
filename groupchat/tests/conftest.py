# groupchat/tests/conftest.py

import datetime
import json
import logging
import random

import jwt
import pytest
from fakeredis import aioredis
from httpx import ASGITransport, AsyncClient

from groupchat.config import AppConfig
from groupchat.gateways.group_chat_gateway import GroupChatGateway
from groupchat.gateways.ranking_gateway import RankingGateway
from groupchat.gateways.transition_gateway import TransitionGateway
from groupchat.infrastructure.event_dispatcher import EventDispatcher
from groupchat.infrastructure.redis_client import RedisClient
from groupchat.infrastructure.security import AuthorizationPolicy
from groupchat.interactors.group_chat_interactor import GroupChatInteractor
from groupchat.interactors.transition_interactor import TransitionInteractor
from groupchat.main import Application

ADMIN_ID = "admin"


@pytest.fixture(scope="function")
def app_config():
    """Provide a test configuration with no settle delay and a fixed seed."""
    return AppConfig(
        REDIS_HOST="localhost",
        REDIS_PORT=6379,
        SECRET_KEY="test_secret_key",
        PROJECT_NAME="Test Group Chat API",
        API_V1_STR="/api/v1",
        ALGORITHM="HS256",
        ADMIN_USER_IDS=[ADMIN_ID],
        TRANSITION_SETTLE_DELAY_SECONDS=0,
        RANDOM_SEED=1234,
    )


@pytest.fixture
def test_logger():
    logger = logging.getLogger("test_groupchat")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture(scope="function")
async def mock_redis():
    """Provide a fake Redis client for testing."""
    redis = aioredis.FakeRedis(decode_responses=True)
    yield redis
    await redis.flushall()
    await redis.aclose()


@pytest.fixture
def redis_client(mock_redis, test_logger):
    client = RedisClient(host="localhost", port=6379, logger=test_logger)
    client.client = mock_redis
    return client


@pytest.fixture
def group_chat_gateway(redis_client, test_logger):
    return GroupChatGateway(redis_client, test_logger)


@pytest.fixture
def ranking_gateway(redis_client):
    return RankingGateway(redis_client)


@pytest.fixture
def transition_gateway(redis_client):
    return TransitionGateway(redis_client)


@pytest.fixture
def dispatched_events():
    return []


@pytest.fixture
def event_dispatcher(dispatched_events, test_logger):
    """A dispatcher that records every event instead of publishing it."""
    dispatcher = EventDispatcher(test_logger)

    async def record(event):
        dispatched_events.append(event)

    for event_type in ("NewGroupChat", "GroupChatUpdate", "GlobalNotification"):
        dispatcher.register(event_type, record)
    return dispatcher


@pytest.fixture
def authorization_policy():
    return AuthorizationPolicy([ADMIN_ID])


@pytest.fixture
def group_chat_interactor(group_chat_gateway, event_dispatcher, test_logger):
    return GroupChatInteractor(group_chat_gateway, event_dispatcher, test_logger)


@pytest.fixture
def transition_interactor(
    group_chat_gateway,
    transition_gateway,
    event_dispatcher,
    authorization_policy,
    test_logger,
):
    return TransitionInteractor(
        group_chat_gateway,
        transition_gateway,
        event_dispatcher,
        authorization_policy,
        test_logger,
        rng=random.Random(42),
        settle_delay=0,
    )


@pytest.fixture
def seed_users(mock_redis):
    """Write ``user:{id}`` records the way the external auth service does."""

    async def _seed(*user_ids):
        for user_id in user_ids:
            await mock_redis.set(
                f"user:{user_id}", json.dumps({"id": user_id, "name": user_id})
            )
        return list(user_ids)

    return _seed


@pytest.fixture(scope="function")
async def app(app_config, mock_redis):
    """Create the FastAPI app backed by the fake Redis."""
    application = Application(config=app_config)
    application.redis_client.client = mock_redis
    return application.create_app()


@pytest.fixture(scope="function")
async def client(app):
    """Provide an HTTP client with the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def auth_header(app_config):
    """Build bearer headers for tokens the external auth service would issue."""

    def _auth_header(
        user_id: str,
        name: str | None = None,
        expires_delta: datetime.timedelta = datetime.timedelta(minutes=30),
    ):
        claims = {
            "sub": user_id,
            "exp": datetime.datetime.now(datetime.timezone.utc) + expires_delta,
        }
        if name:
            claims["name"] = name
        access_token = jwt.encode(
            claims, app_config.SECRET_KEY, algorithm=app_config.ALGORITHM
        )
        return {"Authorization": f"Bearer {access_token}"}

    return _auth_header
