"""
用户管理相关的请求模式
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreateRequest(BaseModel):
    """创建用户请求，必填项由服务层校验"""
    email: Optional[str] = Field(None, description="邮箱")
    password: Optional[str] = Field(None, description="密码，至少 6 位")
    full_name: Optional[str] = Field(None, description="姓名")
    phone: Optional[str] = Field(None, description="电话")
    role: Optional[str] = Field(None, description="角色名", examples=["staff"])


class UserUpdateRequest(BaseModel):
    """更新用户请求，只处理提供的字段"""
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
