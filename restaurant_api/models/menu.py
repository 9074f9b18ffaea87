"""
菜单相关数据模型
"""

from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BeforeValidator, Field

from .base import BaseEntity, PatchModel


class MenuCategory(str, Enum):
    """菜品分类枚举"""
    APPETIZER = "appetizer"
    MAIN = "main"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    SIDE = "side"


def _lower_category(v):
    return v.strip().lower() if isinstance(v, str) else v


def _unique_tags(tags: List[str]) -> List[str]:
    seen: List[str] = []
    for tag in tags:
        if tag and tag not in seen:
            seen.append(tag)
    return seen


Category = Annotated[MenuCategory, BeforeValidator(_lower_category)]
TagSet = Annotated[List[str], AfterValidator(_unique_tags)]


class MenuItemBase(BaseEntity):
    """菜品基础字段"""
    name: str = Field(..., min_length=1, description="菜品名称")
    description: str = Field(..., min_length=1, description="菜品描述")
    price: float = Field(..., ge=0, description="价格")
    category: Category = Field(..., description="分类")
    tags: TagSet = Field(default_factory=list, description="标签（去重）")
    available: bool = Field(True, description="是否供应")


class MenuItemCreate(MenuItemBase):
    """菜品创建/整体更新模型"""
    pass


class MenuItemPatch(PatchModel):
    """菜品局部更新模型"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[Category] = None
    tags: Optional[TagSet] = None
    available: Optional[bool] = None
