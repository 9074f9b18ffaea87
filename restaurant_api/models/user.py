"""
用户相关数据模型（本地账号）
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Role(BaseModel):
    """角色"""
    id: int = Field(..., description="角色ID")
    name: str = Field(..., description="角色名")
    description: Optional[str] = Field(None, description="角色说明")


class User(BaseModel):
    """用户完整模型（不含密码）"""
    id: int = Field(..., description="用户ID")
    email: str = Field(..., description="邮箱")
    full_name: str = Field(..., description="姓名")
    phone: Optional[str] = Field(None, description="电话")
    is_active: bool = Field(True, description="是否启用")
    role: str = Field("staff", description="角色名")
    role_id: Optional[int] = Field(None, description="角色ID")
    role_description: str = Field("", description="角色说明")
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
