"""
自定义异常类
提供更精确的错误处理和异常信息
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """应用基础异常类"""

    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """数据库相关异常"""
    default_code = "DATABASE_ERROR"


class AuthenticationError(BaseApplicationError):
    """认证相关异常"""
    default_code = "AUTHENTICATION_REQUIRED"


class AuthorizationError(BaseApplicationError):
    """授权相关异常"""
    default_code = "PERMISSION_DENIED"


class ValidationError(BaseApplicationError):
    """数据验证异常"""
    default_code = "VALIDATION_ERROR"


class StatusTransitionError(ValidationError):
    """状态流转不合法"""
    default_code = "STATUS_TRANSITION_INVALID"


class NotFoundError(BaseApplicationError):
    """记录不存在"""
    default_code = "RESOURCE_NOT_FOUND"


class ExternalServiceError(BaseApplicationError):
    """第三方服务调用失败"""
    default_code = "EXTERNAL_SERVICE_ERROR"


def format_validation_errors(errors) -> str:
    """把 pydantic 的错误列表拼成一行可读信息"""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)
