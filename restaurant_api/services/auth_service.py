"""
认证服务
本地账号登录、个人资料和修改密码
"""

import logging
from typing import Any, Dict, Optional

from ..core.database import DatabaseManager
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..core.security import SecurityManager, hash_password, verify_password
from ..models.user import User
from .user_service import MIN_PASSWORD_LENGTH, UserService

logger = logging.getLogger(__name__)


class AuthService:
    """认证服务"""

    def __init__(self, db: DatabaseManager, security_manager: SecurityManager):
        self.db = db
        self.security_manager = security_manager
        self.users = UserService(db)

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """邮箱密码登录，成功后记录登录时间并签发会话令牌"""
        if not email or not password:
            raise ValidationError("Email and password are required")

        found = self.users.get_credentials(email)
        if found is None:
            logger.warning("Login failed for unknown email: %s", email)
            raise AuthenticationError("Invalid email or password")

        user: User = found["user"]
        if not user.is_active:
            logger.warning("Login attempt on inactive account: %s", user.email)
            raise AuthorizationError("Account is inactive. Please contact administrator.")

        if not verify_password(password, found["password_hash"]):
            logger.warning("Login failed for %s: wrong password", user.email)
            raise AuthenticationError("Invalid email or password")

        self.db.execute("UPDATE users SET last_login = now() WHERE id = ?", [user.id])
        token = self.security_manager.create_session_token(user.id, user.email, user.role)
        logger.info("User logged in: %s", user.email)

        return {
            "token": token,
            "user": {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "phone": user.phone,
                "role": user.role,
            },
        }

    def profile(self, user_id: int) -> User:
        return self.users.get(user_id)

    def change_password(self, user_id: int, current_password: Optional[str],
                        new_password: Optional[str]) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("New password must be at least 6 characters long")

        row = self.db.execute_one("SELECT password_hash FROM users WHERE id = ?", [user_id])
        if not row:
            raise NotFoundError("User not found")
        if not verify_password(current_password, row[0]):
            raise AuthenticationError("Current password is incorrect")

        self.db.execute(
            "UPDATE users SET password_hash = ?, updated_at = now() WHERE id = ?",
            [hash_password(new_password), user_id],
        )
        logger.info("Password changed for user %s", user_id)
