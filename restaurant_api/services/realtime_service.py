"""
实时会话令牌服务
根据调用方邮箱生成房间名与参会名，签发 LiveKit 兼容的访问令牌（HS256 JWT）
"""

import json
import logging
import re
import time
from typing import Any, Dict, Optional

import jwt

from ..core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def room_name_from_email(email: str, now_ms: Optional[int] = None) -> str:
    """邮箱本地部分去掉特殊字符并小写，加毫秒时间戳"""
    local = email.split("@")[0]
    sanitized = _NON_ALNUM.sub("", local).lower()
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{sanitized}_{timestamp}"


def participant_name_from_email(email: str) -> str:
    """邮箱本地部分，首字母大写"""
    local = email.split("@")[0]
    return local[:1].upper() + local[1:]


class RealtimeTokenService:
    """LiveKit 访问令牌签发"""

    def __init__(self, api_key: Optional[str], api_secret: Optional[str], ttl_seconds: int = 600):
        self.api_key = api_key
        self.api_secret = api_secret
        self.ttl_seconds = ttl_seconds

    def create_access_token(self, room_name: str, participant_name: str, email: str) -> str:
        if not self.api_key or not self.api_secret:
            raise ExternalServiceError("Real-time service credentials are not configured")

        now = int(time.time())
        claims = {
            "iss": self.api_key,
            "sub": participant_name,
            "name": participant_name,
            "nbf": now,
            "exp": now + self.ttl_seconds,
            "metadata": json.dumps({"email": email}),
            "video": {"roomJoin": True, "room": room_name},
        }
        return jwt.encode(claims, self.api_secret, algorithm="HS256")

    def issue(self, email: Optional[str]) -> Dict[str, Any]:
        """为调用方生成房间并签发令牌"""
        if not email:
            raise ValidationError("User email not found in request")

        room_name = room_name_from_email(email)
        participant_name = participant_name_from_email(email)
        token = self.create_access_token(room_name, participant_name, email)
        logger.info("Real-time token issued for %s in room %s", email, room_name)

        return {
            "token": token,
            "roomName": room_name,
            "participantName": participant_name,
            "email": email,
        }
