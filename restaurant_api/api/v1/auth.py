"""
认证路由
本地账号登录、个人资料、修改密码
"""

from fastapi import APIRouter, Depends

from ...core.error_handler import create_success_response
from ...core.security import AuthenticatedIdentity, require_session_identity
from ...schemas.auth import ChangePasswordRequest, LoginRequest
from ...services import AuthService
from ..deps import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(req: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """邮箱密码登录，返回会话令牌"""
    result = service.login(req.email, req.password)
    return create_success_response(data=result, message="Login successful")


@router.get("/profile")
def get_profile(identity: AuthenticatedIdentity = Depends(require_session_identity),
                service: AuthService = Depends(get_auth_service)):
    user = service.profile(int(identity.id))
    return create_success_response(data=user.model_dump(mode="json"))


@router.post("/change-password")
def change_password(req: ChangePasswordRequest,
                    identity: AuthenticatedIdentity = Depends(require_session_identity),
                    service: AuthService = Depends(get_auth_service)):
    service.change_password(int(identity.id), req.current_password, req.new_password)
    return create_success_response(message="Password changed successfully")
