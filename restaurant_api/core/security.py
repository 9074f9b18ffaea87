"""
安全相关功能
密码哈希、本地会话令牌，以及两种身份认证方式：

- FirebaseIdentityProvider：校验第三方签发的 Firebase ID token（RS256，Google 公钥）
- SessionIdentityProvider：校验本地 /auth/login 签发的会话令牌，并从 users 表加载角色

两者都实现 verify(token) -> AuthenticatedIdentity，路由只依赖统一的身份模型
"""

import hashlib
import hmac
import logging
import secrets
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import jwt
import requests
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .database import DatabaseManager
from .exceptions import AuthenticationError, AuthorizationError, ExternalServiceError

logger = logging.getLogger(__name__)

PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 260000

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"
JWKS_CACHE_SECONDS = 3600
# 遇到未知 kid 时两次拉取公钥的最小间隔
JWKS_REFRESH_COOLDOWN_SECONDS = 60


# ---------- 密码 ----------

def hash_password(password: str, salt: Optional[str] = None,
                  iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """加盐 PBKDF2-SHA256，格式 algorithm$iterations$salt$hash"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{PASSWORD_HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except (AttributeError, ValueError):
        return False
    if algorithm != PASSWORD_HASH_ALGORITHM:
        return False
    candidate = hash_password(password, salt=salt, iterations=int(iterations))
    return hmac.compare_digest(candidate.rsplit("$", 1)[1], expected)


# ---------- 身份模型 ----------

class AuthenticatedIdentity(BaseModel):
    """已认证的调用方"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    provider: str


class IdentityProvider:
    """身份校验接口"""

    name = "base"

    def verify(self, token: str) -> AuthenticatedIdentity:
        raise NotImplementedError


# ---------- 本地会话令牌 ----------

class SecurityManager:
    """本地会话令牌的签发与解析"""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_hours = expire_hours

    def create_session_token(self, user_id: int, email: str, role: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "email": email,
            "role": role,
            "iat": now,
            "exp": now + timedelta(hours=self.expire_hours),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_session_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Unauthorized: Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Unauthorized: Invalid token")


class SessionIdentityProvider(IdentityProvider):
    """本地会话令牌 + users/roles 表"""

    name = "session"

    def __init__(self, security_manager: SecurityManager, db: DatabaseManager):
        self.security_manager = security_manager
        self.db = db

    def verify(self, token: str) -> AuthenticatedIdentity:
        payload = self.security_manager.decode_session_token(token)
        user_id = payload.get("userId")
        if user_id is None:
            raise AuthenticationError("Unauthorized: Invalid token")

        row = self.db.execute_one(
            """
            SELECT u.id, u.email, u.full_name, u.phone, COALESCE(r.name, 'staff')
            FROM users u LEFT JOIN roles r ON r.id = u.role_id
            WHERE u.id = ? AND u.is_active = TRUE
            """,
            [user_id],
        )
        if not row:
            raise AuthenticationError("Unauthorized: Invalid token or inactive user")

        return AuthenticatedIdentity(
            id=str(row[0]),
            email=row[1],
            name=row[2],
            phone=row[3],
            role=row[4],
            provider=self.name,
        )


# ---------- Firebase ----------

class FirebaseIdentityProvider(IdentityProvider):
    """Firebase ID token 校验，公钥从 Google JWKS 获取并缓存"""

    name = "firebase"
    role = "customer"

    def __init__(self, project_id: Optional[str], jwks_url: str,
                 http_get: Callable[..., Any] = requests.get, timeout: float = 10.0,
                 refresh_cooldown: float = JWKS_REFRESH_COOLDOWN_SECONDS):
        self.project_id = project_id
        self.jwks_url = jwks_url
        self.http_get = http_get
        self.timeout = timeout
        self.refresh_cooldown = refresh_cooldown
        self._keys: Dict[str, jwt.PyJWK] = {}
        self._fetched_at: Optional[float] = None
        self._attempted_at = 0.0
        self._refresh_lock = threading.Lock()

    def verify(self, token: str) -> AuthenticatedIdentity:
        if not self.project_id:
            raise ExternalServiceError("Firebase project id is not configured")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError:
            raise AuthenticationError("Unauthorized: Invalid or expired token")

        signing_key = self._signing_key(header.get("kid"))
        try:
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=FIREBASE_ISSUER_PREFIX + self.project_id,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.InvalidTokenError as e:
            logger.warning("Firebase token rejected: %s", e)
            raise AuthenticationError("Unauthorized: Invalid or expired token")

        return AuthenticatedIdentity(
            id=claims["sub"],
            email=claims.get("email"),
            name=claims.get("name"),
            role=self.role,
            provider=self.name,
        )

    def _signing_key(self, kid: Optional[str]) -> jwt.PyJWK:
        if not kid:
            raise AuthenticationError("Unauthorized: Invalid or expired token")
        key = self._current_keys(kid).get(kid)
        if key is None:
            raise AuthenticationError("Unauthorized: Invalid or expired token")
        return key

    def _needs_refresh(self, kid: str) -> bool:
        if self._fetched_at is None:
            return True
        now = time.monotonic()
        if now - self._attempted_at < self.refresh_cooldown:
            return False
        return kid not in self._keys or now - self._fetched_at > JWKS_CACHE_SECONDS

    def _current_keys(self, kid: str) -> Dict[str, jwt.PyJWK]:
        """
        返回可用的公钥集合，必要时重新拉取

        同一时间只有一个线程拉取；已有缓存时其他线程不等待，直接使用缓存
        """
        if not self._needs_refresh(kid):
            return self._keys
        if not self._refresh_lock.acquire(blocking=self._fetched_at is None):
            return self._keys
        try:
            if self._needs_refresh(kid):
                self._attempted_at = time.monotonic()
                self._keys = self._fetch_keys()
                self._fetched_at = time.monotonic()
                logger.info("Firebase public keys refreshed: %d keys", len(self._keys))
            return self._keys
        finally:
            self._refresh_lock.release()

    def _fetch_keys(self) -> Dict[str, jwt.PyJWK]:
        try:
            response = self.http_get(self.jwks_url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Failed to fetch Firebase public keys: %s", e)
            raise ExternalServiceError("Unable to verify identity token")

        keys = {}
        for jwk in data.get("keys", []):
            try:
                key = jwt.PyJWK(jwk)
            except (jwt.PyJWKError, jwt.InvalidKeyError) as e:
                logger.warning("Skipping unusable public key %s: %s", jwk.get("kid"), e)
                continue
            keys[key.key_id] = key
        return keys


# ---------- FastAPI 依赖 ----------

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """从 Authorization: Bearer 头中取出令牌"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized: Missing token")
    return credentials.credentials


def get_external_provider(request: Request) -> IdentityProvider:
    return request.app.state.external_identity_provider


def get_session_provider(request: Request) -> IdentityProvider:
    return request.app.state.session_identity_provider


def require_external_identity(
    token: str = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_external_provider),
) -> AuthenticatedIdentity:
    """第三方身份令牌认证"""
    return provider.verify(token)


def require_session_identity(
    token: str = Depends(get_bearer_token),
    provider: IdentityProvider = Depends(get_session_provider),
) -> AuthenticatedIdentity:
    """本地会话令牌认证"""
    return provider.verify(token)


def require_roles(*allowed: str, source: Callable[..., AuthenticatedIdentity] = require_session_identity):
    """
    角色校验依赖

    Args:
        allowed: 允许访问的角色
        source: 身份来源依赖，默认本地会话
    """

    def dependency(identity: AuthenticatedIdentity = Depends(source)) -> AuthenticatedIdentity:
        if identity.role not in allowed:
            logger.warning("Role %s denied, allowed: %s", identity.role, ", ".join(allowed))
            raise AuthorizationError("Forbidden: Insufficient permissions")
        return identity

    return dependency
