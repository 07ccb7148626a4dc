# groupchat/main.py
import logging
import random
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from groupchat.api import group_chats, notifications, rankings
from groupchat.config import AppConfig
from groupchat.domain.exceptions import GroupChatError, StoreError
from groupchat.infrastructure.event_dispatcher import EventDispatcher
from groupchat.infrastructure.event_handlers import EventHandlers
from groupchat.infrastructure.redis_client import RedisClient
from groupchat.infrastructure.security import AuthorizationPolicy, SecurityService


class Application:
    def __init__(self, config: AppConfig):
        self.config = config
        self.logger = self.setup_logger()
        self.redis_client = RedisClient(
            config.REDIS_HOST, config.REDIS_PORT, self.logger, db=config.REDIS_DB
        )
        self.event_dispatcher = EventDispatcher(self.logger)
        self.security_service = SecurityService(config)
        self.authorization_policy = AuthorizationPolicy(config.ADMIN_USER_IDS)
        self.event_handlers = EventHandlers(self.redis_client)
        self.rng = random.Random(config.RANDOM_SEED)

        # Register event handlers
        self.event_dispatcher.register(
            "NewGroupChat", self.event_handlers.publish_new_group_chat
        )
        self.event_dispatcher.register(
            "GroupChatUpdate", self.event_handlers.publish_group_chat_update
        )
        self.event_dispatcher.register(
            "GlobalNotification", self.event_handlers.publish_global_notification
        )

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        await self.redis_client.connect()
        yield
        await self.redis_client.disconnect()

    def setup_logger(self):
        logger = logging.getLogger("GroupChatAPI")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            c_handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            c_handler.setFormatter(formatter)
            logger.addHandler(c_handler)

        return logger

    def create_app(self) -> FastAPI:
        app = FastAPI(
            title=self.config.PROJECT_NAME,
            version=self.config.PROJECT_VERSION,
            description=self.config.PROJECT_DESCRIPTION,
            openapi_url=f"{self.config.API_V1_STR}/openapi.json",
            lifespan=self.lifespan,
        )

        app.state.config = self.config
        app.state.logger = self.logger
        app.state.redis_client = self.redis_client
        app.state.event_dispatcher = self.event_dispatcher
        app.state.security_service = self.security_service
        app.state.authorization_policy = self.authorization_policy
        app.state.rng = self.rng

        # Create routers
        app.include_router(
            group_chats.router,
            prefix=f"{self.config.API_V1_STR}/group-chat",
            tags=["group-chat"],
        )
        app.include_router(
            rankings.router,
            prefix=f"{self.config.API_V1_STR}/rankings",
            tags=["rankings"],
        )
        app.include_router(
            notifications.router,
            prefix=f"{self.config.API_V1_STR}/notifications",
            tags=["notifications"],
        )

        @app.exception_handler(StoreError)
        async def store_exception_handler(request: Request, exc: StoreError):
            self.logger.error(f"Store failure on {request.url.path}: {exc.detail}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": "Group chat operation failed, please try again"},
            )

        @app.exception_handler(GroupChatError)
        async def group_chat_exception_handler(request: Request, exc: GroupChatError):
            return JSONResponse(
                status_code=exc.status_code, content={"detail": exc.detail}
            )

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception):
            self.logger.exception(f"Unhandled error on {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={"message": f"An unexpected error occurred: {str(exc)}"},
            )

        return app


def create():
    config = AppConfig()
    application = Application(config)
    app = application.create_app()
    application.logger.info("Application created and configured")

    return app


app = create()


@app.get("/")
async def root():
    return {"message": "Welcome to the Group Chat API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
