"""
外卖订单服务
营收统计 = 订单金额 + 配送费；配送费不计入订单 total
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel

from ..core.document_store import DocumentStore
from ..models.order import DELIVERY_TRANSITIONS, DeliveryOrderCreate, DeliveryOrderPatch, DeliveryStatus
from .entity_service import OrderEntityService, Payload


class DeliveryService(OrderEntityService):
    collection = "delivery_orders"
    id_field = "order_id"
    id_prefix = "DO"
    label = "Delivery order"

    create_model = DeliveryOrderCreate
    patch_model = DeliveryOrderPatch

    search_fields = ("customer_name", "customer_email", "customer_phone", "delivery_address", "order_id")
    sortable_fields = ("delivery_time", "total", "delivery_fee", "status", "customer_name")

    status_enum = DeliveryStatus
    transitions = DELIVERY_TRANSITIONS

    revenue_fields = ("total", "delivery_fee")

    def __init__(self, store: DocumentStore, enforce_transitions: bool = False,
                 default_delivery_fee: float = 5.0):
        super().__init__(store, enforce_transitions)
        self.default_delivery_fee = default_delivery_fee

    def create(self, payload: Payload) -> Dict[str, Any]:
        return super().create(self._with_default_fee(payload))

    def _carry_over(self, current: Dict[str, Any], model: BaseModel) -> BaseModel:
        # 整体更新未携带配送费时沿用原配送费
        if "delivery_fee" not in model.model_fields_set:
            fee = current.get("delivery_fee")
            model = model.model_copy(update={
                "delivery_fee": self.default_delivery_fee if fee is None else fee,
            })
        return super()._carry_over(current, model)

    def _with_default_fee(self, payload: Payload) -> Payload:
        """未指定配送费时使用配置的默认值"""
        if isinstance(payload, BaseModel):
            if "delivery_fee" in payload.model_fields_set:
                return payload
            payload = payload.model_dump(exclude_unset=True)
        if isinstance(payload, Mapping) and "delivery_fee" not in payload:
            payload = {**payload, "delivery_fee": self.default_delivery_fee}
        return payload
