# groupchat/api/dependencies.py
import logging
import random

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from groupchat.config import AppConfig
from groupchat.gateways.group_chat_gateway import GroupChatGateway
from groupchat.gateways.ranking_gateway import RankingGateway
from groupchat.gateways.transition_gateway import TransitionGateway
from groupchat.infrastructure import schemas
from groupchat.infrastructure.event_dispatcher import EventDispatcher
from groupchat.infrastructure.redis_client import RedisClient
from groupchat.infrastructure.security import AuthorizationPolicy, SecurityService
from groupchat.interactors.group_chat_interactor import GroupChatInteractor
from groupchat.interactors.notification_interactor import NotificationInteractor
from groupchat.interactors.ranking_interactor import RankingInteractor
from groupchat.interactors.transition_interactor import TransitionInteractor

# Tokens are issued by the external auth service; this one only validates them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


def get_security_service(request: Request) -> SecurityService:
    return request.app.state.security_service


def get_authorization_policy(request: Request) -> AuthorizationPolicy:
    return request.app.state.authorization_policy


def get_event_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.event_dispatcher


def get_redis_client(request: Request) -> RedisClient:
    return request.app.state.redis_client


def get_rng(request: Request) -> random.Random:
    return request.app.state.rng


async def get_group_chat_gateway(
    redis_client: RedisClient = Depends(get_redis_client),
    logger: logging.Logger = Depends(get_logger),
):
    return GroupChatGateway(redis_client, logger)


async def get_ranking_gateway(redis_client: RedisClient = Depends(get_redis_client)):
    return RankingGateway(redis_client)


async def get_transition_gateway(
    redis_client: RedisClient = Depends(get_redis_client),
):
    return TransitionGateway(redis_client)


async def get_group_chat_interactor(
    config: AppConfig = Depends(get_config),
    logger: logging.Logger = Depends(get_logger),
    event_dispatcher: EventDispatcher = Depends(get_event_dispatcher),
    group_chat_gateway: GroupChatGateway = Depends(get_group_chat_gateway),
):
    return GroupChatInteractor(
        group_chat_gateway,
        event_dispatcher,
        logger,
        capacity=config.GROUP_CHAT_CAPACITY,
        join_retries=config.JOIN_MAX_RETRIES,
    )


async def get_transition_interactor(
    config: AppConfig = Depends(get_config),
    logger: logging.Logger = Depends(get_logger),
    rng: random.Random = Depends(get_rng),
    event_dispatcher: EventDispatcher = Depends(get_event_dispatcher),
    authorization_policy: AuthorizationPolicy = Depends(get_authorization_policy),
    group_chat_gateway: GroupChatGateway = Depends(get_group_chat_gateway),
    transition_gateway: TransitionGateway = Depends(get_transition_gateway),
):
    return TransitionInteractor(
        group_chat_gateway,
        transition_gateway,
        event_dispatcher,
        authorization_policy,
        logger,
        rng=rng,
        capacity=config.GROUP_CHAT_CAPACITY,
        settle_delay=config.TRANSITION_SETTLE_DELAY_SECONDS,
        preserve_rankings=config.PRESERVE_RANKINGS_ON_TRANSITION,
    )


async def get_ranking_interactor(
    ranking_gateway: RankingGateway = Depends(get_ranking_gateway),
    group_chat_gateway: GroupChatGateway = Depends(get_group_chat_gateway),
):
    return RankingInteractor(ranking_gateway, group_chat_gateway)


async def get_notification_interactor(
    event_dispatcher: EventDispatcher = Depends(get_event_dispatcher),
    authorization_policy: AuthorizationPolicy = Depends(get_authorization_policy),
):
    return NotificationInteractor(event_dispatcher, authorization_policy)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    security_service: SecurityService = Depends(get_security_service),
) -> schemas.User:
    user = security_service.decode_access_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
