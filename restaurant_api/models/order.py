"""
订单相关数据模型（外带订单 / 外卖订单）
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import CustomerInfo, CustomerInfoPatch


class TakeawayStatus(str, Enum):
    """外带订单状态枚举"""
    PENDING = "pending"       # 待处理
    PREPARING = "preparing"   # 制作中
    READY = "ready"           # 待取餐
    COMPLETED = "completed"   # 已完成
    CANCELLED = "cancelled"   # 已取消


class DeliveryStatus(str, Enum):
    """外卖订单状态枚举"""
    PENDING = "pending"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TAKEAWAY_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"preparing", "cancelled"}),
    "preparing": frozenset({"ready", "cancelled"}),
    "ready": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}

DELIVERY_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"preparing", "cancelled"}),
    "preparing": frozenset({"out_for_delivery", "cancelled"}),
    "out_for_delivery": frozenset({"delivered", "cancelled"}),
    "delivered": frozenset(),
    "cancelled": frozenset(),
}


class OrderLine(BaseModel):
    """订单明细行，只存在于所属订单内"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(..., min_length=1, description="菜品名称")
    quantity: int = Field(1, ge=1, description="数量")
    price: float = Field(0, ge=0, description="单价")


class OrderBase(CustomerInfo):
    """订单基础字段，total 由服务端根据明细计算"""
    items: List[OrderLine] = Field(default_factory=list, description="订单明细")
    special_instructions: str = Field("", description="备注")


class TakeawayOrderCreate(OrderBase):
    """外带订单创建/整体更新模型"""
    pickup_time: str = Field(..., min_length=1, description="取餐时间")
    status: TakeawayStatus = Field(TakeawayStatus.PENDING, description="订单状态")


class DeliveryOrderCreate(OrderBase):
    """外卖订单创建/整体更新模型"""
    delivery_address: str = Field(..., min_length=1, description="配送地址")
    delivery_time: str = Field(..., min_length=1, description="配送时间")
    delivery_fee: float = Field(5.0, ge=0, description="配送费，不计入 total")
    status: DeliveryStatus = Field(DeliveryStatus.PENDING, description="订单状态")


class OrderPatchBase(CustomerInfoPatch):
    items: Optional[List[OrderLine]] = None
    special_instructions: Optional[str] = None


class TakeawayOrderPatch(OrderPatchBase):
    """外带订单局部更新模型"""
    pickup_time: Optional[str] = Field(None, min_length=1)
    status: Optional[TakeawayStatus] = None


class DeliveryOrderPatch(OrderPatchBase):
    """外卖订单局部更新模型"""
    delivery_address: Optional[str] = Field(None, min_length=1)
    delivery_time: Optional[str] = Field(None, min_length=1)
    delivery_fee: Optional[float] = Field(None, ge=0)
    status: Optional[DeliveryStatus] = None
