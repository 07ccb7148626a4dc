# groupchat/domain/exceptions.py


class GroupChatError(Exception):
    """Base class for errors surfaced by the group chat core."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(GroupChatError):
    status_code = 404


class ForbiddenError(GroupChatError):
    status_code = 403


class InvalidRequestError(GroupChatError):
    status_code = 400


class StoreError(GroupChatError):
    """The key-value store or the broker failed to answer."""

    status_code = 500
