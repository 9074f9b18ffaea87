"""
认证相关的请求模式
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """登录请求"""
    email: Optional[str] = Field(None, description="邮箱", examples=["admin@example.com"])
    password: Optional[str] = Field(None, description="密码")


class ChangePasswordRequest(BaseModel):
    """修改密码请求，兼容 camelCase 字段名"""
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword", description="当前密码")
    new_password: Optional[str] = Field(None, alias="newPassword", description="新密码")
