# groupchat/api/notifications.py

from fastapi import APIRouter, Depends

from groupchat.api.dependencies import get_current_user, get_notification_interactor
from groupchat.infrastructure import schemas
from groupchat.interactors.notification_interactor import NotificationInteractor

router = APIRouter()


@router.post("/global", response_model=schemas.SuccessResponse)
async def send_global_notification(
    notification: schemas.GlobalNotificationRequest,
    notification_interactor: NotificationInteractor = Depends(
        get_notification_interactor
    ),
    current_user: schemas.User = Depends(get_current_user),
):
    await notification_interactor.send_global(current_user, notification)
    return schemas.SuccessResponse(
        success=True, message="Notification sent successfully"
    )
