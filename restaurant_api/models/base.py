"""
基础数据模型
定义通用的模型基类和常用字段
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseEntity(BaseModel):
    """基础实体模型：去除首尾空白，忽略未知字段"""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=True,
        extra="ignore",
    )


class PatchModel(BaseEntity):
    """
    局部更新模型基类
    所有字段可选；只有请求中出现的字段参与合并，未知字段直接拒绝
    """

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """请求中实际提供的字段"""
        return self.model_dump(mode="json", exclude_unset=True)


def normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return value.strip().lower()


class CustomerInfo(BaseEntity):
    """顾客身份信息"""
    customer_name: str = Field(..., min_length=1, description="顾客姓名")
    customer_phone: str = Field(..., min_length=1, description="联系电话")
    customer_email: str = Field(..., min_length=3, description="邮箱（统一小写）")

    @field_validator("customer_email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)


class CustomerInfoPatch(PatchModel):
    """顾客身份信息（局部更新）"""
    customer_name: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = Field(None, min_length=1)
    customer_email: Optional[str] = Field(None, min_length=3)

    @field_validator("customer_email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return normalize_email(v)
