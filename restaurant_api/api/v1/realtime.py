"""
实时会话令牌路由
"""

from fastapi import APIRouter, Depends

from ...core.error_handler import create_success_response
from ...core.security import AuthenticatedIdentity, require_external_identity, require_roles
from ...services import RealtimeTokenService
from ..deps import get_realtime_service

router = APIRouter(tags=["realtime"])


@router.post("/getToken")
def get_token(identity: AuthenticatedIdentity = Depends(require_roles("customer", source=require_external_identity)),
              service: RealtimeTokenService = Depends(get_realtime_service)):
    """为已登录顾客签发 10 分钟有效的实时会话令牌"""
    result = service.issue(identity.email)
    return create_success_response(data=result, message="Token generated successfully")
