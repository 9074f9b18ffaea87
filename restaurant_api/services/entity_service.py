"""
实体服务基类
菜单、预订、外带订单、外卖订单共用的增删改查、状态更新、局部更新与统计逻辑

继承关系：
- EntityService：通用 CRUD + 局部更新
- CustomerEntityService：带顾客信息和状态的实体（预订/订单），增加状态流转、按顾客搜索、按邮箱更新
- OrderEntityService：带明细的订单，写入前由服务端重新计算 total
"""

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.document_store import DocumentStore
from ..core.exceptions import (
    NotFoundError,
    StatusTransitionError,
    ValidationError,
    format_validation_errors,
)
from ..models.base import BaseEntity, PatchModel, normalize_email
from .identifiers import generate_identifier
from .pricing import calculate_total
from .query_builder import build_list_query, build_user_search_query

logger = logging.getLogger(__name__)

# 存储层附加的字段，不属于业务文档
STORE_FIELDS = ("id", "created_at", "updated_at")

Payload = Union[BaseModel, Mapping[str, Any]]


class EntityService:
    """单一集合的通用业务服务"""

    collection: str = ""
    id_field: str = ""
    id_prefix: str = ""
    id_suffix_length: int = 6
    label: str = "Record"

    create_model: Type[BaseEntity] = BaseEntity
    patch_model: Type[PatchModel] = PatchModel

    search_fields: Tuple[str, ...] = ()
    sortable_fields: Tuple[str, ...] = ()

    def __init__(self, store: DocumentStore):
        self.store = store

    # ---------- 查询 ----------

    def list(self, search: Optional[str] = None, sort_by: Optional[str] = None,
             order: Optional[str] = "desc", **filters) -> List[Dict[str, Any]]:
        """按条件列出记录"""
        query = build_list_query(
            search_fields=self.search_fields,
            sortable_fields=self.sortable_fields,
            filters=filters,
            search=search,
            sort_by=sort_by,
            order=order,
        )
        return self.store.find(self.collection, query)

    def get(self, ext_id: str) -> Dict[str, Any]:
        """按外部编号获取记录"""
        record = self.store.find_one(self.collection, ext_id)
        if record is None:
            raise NotFoundError(f"{self.label} not found")
        return record

    # ---------- 写入 ----------

    def create(self, payload: Payload) -> Dict[str, Any]:
        """校验、分配编号、持久化"""
        model = self._validate(self.create_model, payload)
        self._check_new_record(model)
        ext_id = generate_identifier(self.id_prefix, self.id_suffix_length)
        record = self.store.insert(self.collection, ext_id, self._to_document(model, ext_id))
        logger.info("%s created: %s", self.label, ext_id)
        return record

    def update(self, ext_id: str, payload: Payload) -> Dict[str, Any]:
        """整体更新：替换所有可变字段，编号保持不变"""
        model = self._validate(self.create_model, payload)
        current = self.get(ext_id)
        model = self._carry_over(current, model)
        return self._save(current, self._to_document(model, ext_id))

    def patch(self, ext_id: str, changes: Payload) -> Dict[str, Any]:
        """局部更新：只合并提供的字段"""
        changes = self._patch_changes(changes)
        current = self.get(ext_id)
        return self._merge(current, changes)

    def delete(self, ext_id: str) -> None:
        if not self.store.delete(self.collection, ext_id):
            raise NotFoundError(f"{self.label} not found")
        logger.info("%s deleted: %s", self.label, ext_id)

    def stats(self) -> Dict[str, Any]:
        return {"total": self.store.count(self.collection)}

    # ---------- 内部方法 ----------

    def _validate(self, model_cls: Type[BaseModel], payload: Payload) -> BaseModel:
        if isinstance(payload, model_cls):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(exclude_unset=True)
        try:
            return model_cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                "Validation error",
                details={"reason": format_validation_errors(e.errors())},
            )

    def _patch_changes(self, changes: Payload) -> Dict[str, Any]:
        """校验局部更新字段，空字段集在访问存储之前就拒绝"""
        patch = self._validate(self.patch_model, changes)
        data = patch.changes()
        if not data:
            raise ValidationError("No data provided for update")
        return data

    def _merge(self, current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
        """合并后按完整模型重新校验再保存"""
        merged = {**self._document_of(current), **changes}
        model = self._validate(self.create_model, merged)
        return self._save(current, self._to_document(model, current[self.id_field]))

    def _save(self, current: Dict[str, Any], doc: Dict[str, Any]) -> Dict[str, Any]:
        ext_id = current[self.id_field]
        record = self.store.replace(self.collection, ext_id, doc)
        if record is None:
            # 并发删除
            raise NotFoundError(f"{self.label} not found")
        return record

    def _document_of(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in record.items() if k not in STORE_FIELDS}

    def _to_document(self, model: BaseModel, ext_id: str) -> Dict[str, Any]:
        doc = {self.id_field: ext_id}
        doc.update(model.model_dump(mode="json"))
        return self._prepare(doc)

    def _prepare(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """写入前的派生字段计算"""
        return doc

    def _check_new_record(self, model: BaseModel) -> None:
        pass

    def _carry_over(self, current: Dict[str, Any], model: BaseModel) -> BaseModel:
        """整体更新时需要从旧记录保留的字段"""
        return model


class CustomerEntityService(EntityService):
    """带顾客信息与状态生命周期的实体"""

    email_field: str = "customer_email"
    status_enum: Optional[Type[Enum]] = None
    transitions: Optional[Dict[str, FrozenSet[str]]] = None
    initial_status: str = "pending"

    def __init__(self, store: DocumentStore, enforce_transitions: bool = False):
        super().__init__(store)
        self.enforce_transitions = enforce_transitions

    def list(self, search: Optional[str] = None, sort_by: Optional[str] = None,
             order: Optional[str] = "desc", status: Optional[str] = None) -> List[Dict[str, Any]]:
        return super().list(search=search, sort_by=sort_by, order=order, status=status)

    def search_by_user(self, name: Optional[str] = None, email: Optional[str] = None,
                       phone: Optional[str] = None) -> List[Dict[str, Any]]:
        """按顾客姓名/邮箱/电话搜索"""
        query = build_user_search_query(name=name, email=email, phone=phone)
        return self.store.find(self.collection, query)

    def update_status(self, ext_id: str, status: Optional[str]) -> Dict[str, Any]:
        """只更新状态字段"""
        if status is None or not str(status).strip():
            raise ValidationError("Status is required")
        status = str(status).strip()
        allowed = self.allowed_statuses()
        if status not in allowed:
            raise ValidationError(
                f"Invalid status '{status}'. Allowed values: {', '.join(allowed)}"
            )

        current = self.get(ext_id)
        previous = current.get("status")
        self._check_transition(previous, status)

        doc = self._document_of(current)
        doc["status"] = status
        record = self._save(current, doc)
        logger.info("%s %s status: %s -> %s", self.label, ext_id, previous, status)
        return record

    def patch_by_email(self, email: str, changes: Payload) -> Dict[str, Any]:
        """按顾客邮箱局部更新，邮箱对应多条时更新最新的一条"""
        if not email or not email.strip():
            raise ValidationError("Email parameter is required")
        changes = self._patch_changes(changes)
        current = self.store.find_latest_by_field(
            self.collection, self.email_field, normalize_email(email)
        )
        if current is None:
            raise NotFoundError(f"{self.label} not found with provided email")
        return self._merge(current, changes)

    def stats(self) -> Dict[str, Any]:
        groups = self.store.aggregate(self.collection, "status")
        return {
            "total": sum(g["count"] for g in groups),
            "byStatus": [{"_id": g["key"], "count": g["count"]} for g in groups],
        }

    def allowed_statuses(self) -> List[str]:
        return [s.value for s in self.status_enum] if self.status_enum else []

    def _merge(self, current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
        if "status" in changes:
            self._check_transition(current.get("status"), changes["status"])
        return super()._merge(current, changes)

    def _carry_over(self, current: Dict[str, Any], model: BaseModel) -> BaseModel:
        # 整体更新未携带状态时沿用原状态
        if "status" not in model.model_fields_set:
            return model.model_copy(update={"status": current.get("status")})
        self._check_transition(current.get("status"), model.status)
        return model

    def _check_new_record(self, model: BaseModel) -> None:
        if self.enforce_transitions and model.status != self.initial_status:
            raise StatusTransitionError(
                f"New {self.label.lower()} must start in '{self.initial_status}' status"
            )

    def _check_transition(self, current: Optional[str], new: str) -> None:
        """状态流转校验，仅在开启时生效"""
        if not self.enforce_transitions or self.transitions is None:
            return
        if current is None or current == new:
            return
        if new not in self.transitions.get(current, frozenset()):
            raise StatusTransitionError(
                f"Cannot change {self.label.lower()} status from '{current}' to '{new}'"
            )


class OrderEntityService(CustomerEntityService):
    """带明细行的订单，total 始终由服务端计算"""

    # 统计营收时累加的字段
    revenue_fields: Tuple[str, ...] = ("total",)

    def _prepare(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        doc["total"] = calculate_total(doc.get("items") or [])
        return doc

    def stats(self) -> Dict[str, Any]:
        groups = self.store.aggregate(self.collection, "status", sum_fields=self.revenue_fields)
        return {
            "total": sum(g["count"] for g in groups),
            "totalRevenue": round(sum(g["sum"] or 0 for g in groups), 2),
            "byStatus": [
                {
                    "_id": g["key"],
                    "count": g["count"],
                    "totalRevenue": round(g["sum"] or 0, 2),
                }
                for g in groups
            ],
        }
