"""
Authentication Service

Verifies JWTs issued by the portal's login flow and resolves the request
identity (user id + role).
"""

from typing import Optional, Dict, Any
from datetime import timedelta
import jwt

from app.config import Config
from app.utils.datetime_utils import get_now_utc
from app.utils.logger import get_logger

logger = get_logger(__name__)

JWT_EXPIRATION_HOURS = 24


class AuthService:
    """Service for verifying JWT tokens"""

    def __init__(self, config: Config):
        self.config = config
        self.jwt_secret = config.auth.jwt_secret
        self.jwt_algorithm = config.auth.jwt_algorithm

    def generate_token(self, user_id: str, role: str, email: Optional[str] = None) -> str:
        payload = {
            "user_id": user_id,
            "role": role,
            "exp": get_now_utc() + timedelta(hours=JWT_EXPIRATION_HOURS),
            "iat": get_now_utc(),
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("[AuthService] Token has expired")
            return None
        except jwt.InvalidTokenError:
            return None

    def resolve_identity(self, token: Optional[str]) -> Optional[Dict[str, str]]:
        """Return {"id", "role"} for a valid token, else None."""
        if not token:
            return None
        payload = self.verify_token(token)
        if not payload:
            return None

        # Tokens from the legacy portal carry "id" rather than "user_id"
        user_id = payload.get("user_id") or payload.get("id")
        role = payload.get("role")
        if not user_id or not role:
            return None
        return {"id": str(user_id), "role": role}
