from typing import Optional

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from groupchat.infrastructure import schemas


class SecurityService:
    """Validates the bearer tokens issued by the external auth service."""

    def __init__(self, config):
        self.config = config

    def decode_access_token(self, token: str) -> Optional[schemas.User]:
        try:
            payload = jwt.decode(
                token, self.config.SECRET_KEY, algorithms=[self.config.ALGORITHM]
            )
        except (ExpiredSignatureError, InvalidTokenError):
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return schemas.User(id=str(user_id), name=payload.get("name"))


class AuthorizationPolicy:
    def __init__(self, admin_user_ids: list[str]):
        self.admin_user_ids = set(admin_user_ids)

    def can_initiate_transition(self, user_id: str) -> bool:
        return user_id in self.admin_user_ids

    def can_send_global_notification(self, user_id: str) -> bool:
        return user_id in self.admin_user_ids
