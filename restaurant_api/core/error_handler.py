"""
统一错误处理模块
提供标准化的错误响应格式和错误处理中间件

主要功能：
- 统一的错误响应格式 {success, message, error}
- 自动异常捕获和日志记录
- HTTP状态码映射
"""

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import BaseApplicationError, format_validation_errors

logger = logging.getLogger(__name__)


class ErrorResponse:
    """标准错误响应格式"""

    def __init__(self, message: str, error: Optional[str] = None,
                 http_status: int = 400, stack: Optional[str] = None):
        self.message = message
        self.error = error
        self.http_status = http_status
        self.stack = stack

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        body: Dict[str, Any] = {
            "success": False,
            "message": self.message,
        }
        if self.error:
            body["error"] = self.error
        if self.stack:
            body["stack"] = self.stack
        return body

    def to_json_response(self) -> JSONResponse:
        """转换为FastAPI JSONResponse"""
        return JSONResponse(
            status_code=self.http_status,
            content=self.to_dict()
        )


class ErrorHandler:
    """全局错误处理器"""

    # 错误代码到HTTP状态码的映射
    ERROR_CODE_STATUS_MAP = {
        "VALIDATION_ERROR": 400,
        "STATUS_TRANSITION_INVALID": 400,
        "AUTHENTICATION_REQUIRED": 401,
        "PERMISSION_DENIED": 403,
        "RESOURCE_NOT_FOUND": 404,
        "DATABASE_ERROR": 500,
        "EXTERNAL_SERVICE_ERROR": 500,
        "INTERNAL_ERROR": 500,
    }

    @classmethod
    def handle_application_error(cls, error: BaseApplicationError) -> ErrorResponse:
        """处理应用业务异常"""
        http_status = cls.ERROR_CODE_STATUS_MAP.get(error.error_code, 400)
        if http_status >= 500:
            logger.error("%s: %s", error.error_code, error.message)

        detail = error.details.get("reason") if error.details else None
        return ErrorResponse(
            message=error.message,
            error=detail or error.error_code,
            http_status=http_status
        )

    @classmethod
    def handle_http_exception(cls, error: StarletteHTTPException) -> ErrorResponse:
        """处理HTTP异常（含未匹配路由）"""
        message = str(error.detail)
        if error.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return ErrorResponse(message=message, http_status=error.status_code)

    @classmethod
    def handle_validation_error(cls, error: RequestValidationError) -> ErrorResponse:
        """处理请求参数验证错误"""
        return ErrorResponse(
            message="Validation error",
            error=format_validation_errors(error.errors()),
            http_status=400
        )

    @classmethod
    def handle_unknown_error(cls, error: Exception, include_stack: bool = False) -> ErrorResponse:
        """处理未知异常"""
        logger.error("Unhandled error: %s", error, exc_info=error)
        return ErrorResponse(
            message="Internal server error",
            error=str(error) or type(error).__name__,
            http_status=500,
            stack="".join(traceback.format_exception(type(error), error, error.__traceback__))
            if include_stack else None
        )


async def application_error_handler(request: Request, exc: BaseApplicationError) -> JSONResponse:
    """应用异常处理中间件"""
    return ErrorHandler.handle_application_error(exc).to_json_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP异常处理中间件"""
    return ErrorHandler.handle_http_exception(exc).to_json_response()


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """验证异常处理中间件"""
    return ErrorHandler.handle_validation_error(exc).to_json_response()


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """通用异常处理中间件"""
    # 是否附带调用栈由所属应用的配置决定
    include_stack = request.app.state.include_stack
    return ErrorHandler.handle_unknown_error(exc, include_stack).to_json_response()


def create_success_response(data: Any = None, message: Optional[str] = None,
                            count: Optional[int] = None) -> Dict[str, Any]:
    """创建标准成功响应"""
    response: Dict[str, Any] = {"success": True}

    if message is not None:
        response["message"] = message
    if count is not None:
        response["count"] = count
    if data is not None:
        response["data"] = data

    return response
