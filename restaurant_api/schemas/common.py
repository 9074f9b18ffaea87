"""
通用请求模式
"""

from typing import Optional

from pydantic import BaseModel, Field


class StatusUpdateRequest(BaseModel):
    """状态更新请求，取值由各实体服务校验"""
    status: Optional[str] = Field(None, description="新状态", examples=["confirmed"])


class AvailabilityUpdateRequest(BaseModel):
    """菜品供应状态更新请求"""
    available: Optional[bool] = Field(None, description="是否供应")
