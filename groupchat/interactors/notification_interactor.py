# groupchat/interactors/notification_interactor.py
from groupchat.domain.events import GlobalNotification, Initiator
from groupchat.domain.exceptions import ForbiddenError
from groupchat.domain.timestamps import now_ms
from groupchat.infrastructure import schemas
from groupchat.infrastructure.event_dispatcher import EventDispatcher
from groupchat.infrastructure.security import AuthorizationPolicy


class NotificationInteractor:
    def __init__(
        self,
        event_dispatcher: EventDispatcher,
        authorization_policy: AuthorizationPolicy,
    ):
        self.event_dispatcher = event_dispatcher
        self.authorization_policy = authorization_policy

    async def send_global(
        self, sender: schemas.User, notification: schemas.GlobalNotificationRequest
    ) -> None:
        if not self.authorization_policy.can_send_global_notification(sender.id):
            raise ForbiddenError("Admin access required")
        await self.event_dispatcher.dispatch(
            GlobalNotification(
                type=notification.type,
                message=notification.message or "System notification",
                timestamp=now_ms(),
                sender=Initiator(id=sender.id, name=sender.name or "Admin"),
            )
        )
