import hmac
from typing import Optional

from blog.core.config import Settings
from blog.core.security import ADMIN_ROLE, create_access_token, decode_access_token


class AdminAuthService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def verify_password(self, password: str) -> bool:
        return hmac.compare_digest(
            password.encode("utf-8"), self.settings.ADMIN_PASSWORD.encode("utf-8")
        )

    def login(self, password: str) -> Optional[str]:
        """Exchange the admin password for a signed token, or None if it does not match."""
        if not self.verify_password(password):
            return None
        return create_access_token(self.settings, {"role": ADMIN_ROLE})

    def verify_token(self, token: Optional[str]) -> Optional[dict]:
        if not token:
            return None
        payload = decode_access_token(self.settings, token)
        if not payload or payload.get("role") != ADMIN_ROLE:
            return None
        return payload
