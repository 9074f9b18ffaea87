"""
外带订单服务
"""

from ..models.order import TAKEAWAY_TRANSITIONS, TakeawayOrderCreate, TakeawayOrderPatch, TakeawayStatus
from .entity_service import OrderEntityService


class TakeawayService(OrderEntityService):
    collection = "takeaway_orders"
    id_field = "order_id"
    id_prefix = "TO"
    label = "Takeaway order"

    create_model = TakeawayOrderCreate
    patch_model = TakeawayOrderPatch

    search_fields = ("customer_name", "customer_email", "customer_phone", "order_id")
    sortable_fields = ("pickup_time", "total", "status", "customer_name")

    status_enum = TakeawayStatus
    transitions = TAKEAWAY_TRANSITIONS
