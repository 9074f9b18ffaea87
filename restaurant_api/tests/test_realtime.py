"""
实时会话令牌测试
"""

import json

import jwt
import pytest

from restaurant_api.core.exceptions import ExternalServiceError, ValidationError
from restaurant_api.services.realtime_service import (
    RealtimeTokenService,
    participant_name_from_email,
    room_name_from_email,
)

from .conftest import TEST_LIVEKIT_SECRET


class TestNames:

    def test_room_name(self):
        assert room_name_from_email("Jane.Doe+vip@example.com", now_ms=1700000000000) == "janedoevip_1700000000000"

    def test_participant_name(self):
        assert participant_name_from_email("jane.doe@example.com") == "Jane.doe"


class TestRealtimeTokenService:

    def test_issue(self):
        service = RealtimeTokenService("api-key", TEST_LIVEKIT_SECRET, ttl_seconds=600)
        result = service.issue("jane@example.com")

        assert result["email"] == "jane@example.com"
        assert result["participantName"] == "Jane"
        assert result["roomName"].startswith("jane_")

        claims = jwt.decode(result["token"], TEST_LIVEKIT_SECRET, algorithms=["HS256"])
        assert claims["iss"] == "api-key"
        assert claims["sub"] == "Jane"
        assert claims["video"] == {"roomJoin": True, "room": result["roomName"]}
        assert json.loads(claims["metadata"]) == {"email": "jane@example.com"}
        assert claims["exp"] - claims["nbf"] == 600

    def test_missing_email(self):
        with pytest.raises(ValidationError):
            RealtimeTokenService("api-key", TEST_LIVEKIT_SECRET).issue(None)

    def test_missing_credentials(self):
        with pytest.raises(ExternalServiceError):
            RealtimeTokenService(None, None).issue("jane@example.com")
