"""
预订相关数据模型
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import CustomerInfo, CustomerInfoPatch


class ReservationStatus(str, Enum):
    """预订状态枚举"""
    PENDING = "pending"       # 待确认
    CONFIRMED = "confirmed"   # 已确认
    CANCELLED = "cancelled"   # 已取消
    COMPLETED = "completed"   # 已完成


RESERVATION_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


class _Section(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class Composition(_Section):
    """同行人员构成"""
    adults: int = Field(0, ge=0)
    kids: int = Field(0, ge=0)
    elders: int = Field(0, ge=0)
    specially_abled: int = Field(0, ge=0)


class SeatingPreferences(_Section):
    """座位偏好"""
    table_area: Literal["window", "patio", "indoor", "bar", ""] = ""
    seating_type: Literal["booth", "standard", "high-top", ""] = ""
    accessibility: bool = False
    near: str = ""


class Parking(_Section):
    """停车需求"""
    required: bool = False
    type: Literal["valet", "self", ""] = ""


class Dietary(_Section):
    """饮食要求"""
    plan: Literal["none", "vegetarian", "vegan", "gluten-free", "halal", "kosher", ""] = ""
    restrictions: List[str] = Field(default_factory=list)
    notes: str = ""


class Occasion(_Section):
    """用餐场合"""
    type: Literal["none", "birthday", "anniversary", "business", "celebration", ""] = ""
    details: str = ""


class ReservationCreate(CustomerInfo):
    """预订创建/整体更新模型"""
    reservation_time: str = Field(..., min_length=1, description="预订时间")
    party_size: int = Field(..., ge=1, description="用餐人数")
    composition: Composition = Field(default_factory=Composition)
    preferences: SeatingPreferences = Field(default_factory=SeatingPreferences)
    parking: Parking = Field(default_factory=Parking)
    kids_seats: int = Field(0, ge=0, description="儿童座椅数量")
    dietary: Dietary = Field(default_factory=Dietary)
    occasion: Occasion = Field(default_factory=Occasion)
    special_requests: str = Field("", description="特殊需求")
    status: ReservationStatus = Field(ReservationStatus.PENDING, description="预订状态")


class ReservationPatch(CustomerInfoPatch):
    """预订局部更新模型"""
    reservation_time: Optional[str] = Field(None, min_length=1)
    party_size: Optional[int] = Field(None, ge=1)
    composition: Optional[Composition] = None
    preferences: Optional[SeatingPreferences] = None
    parking: Optional[Parking] = None
    kids_seats: Optional[int] = Field(None, ge=0)
    dietary: Optional[Dietary] = None
    occasion: Optional[Occasion] = None
    special_requests: Optional[str] = None
    status: Optional[ReservationStatus] = None
