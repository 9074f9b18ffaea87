"""
外卖订单路由
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...models.order import DeliveryOrderCreate, DeliveryOrderPatch
from ...schemas.common import StatusUpdateRequest
from ...services import DeliveryService
from ..deps import get_delivery_service

router = APIRouter(prefix="/delivery", tags=["delivery"])


@router.get("")
def list_delivery_orders(
    status: Optional[str] = Query(None, description="状态，all 表示不过滤"),
    search: Optional[str] = Query(None, description="按顾客姓名/邮箱/电话/订单号搜索"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: str = Query("desc"),
    service: DeliveryService = Depends(get_delivery_service),
):
    """获取外卖订单列表"""
    orders = service.list(search=search, sort_by=sort_by, order=order, status=status)
    return create_success_response(data=orders, count=len(orders))


@router.get("/stats")
def get_delivery_stats(service: DeliveryService = Depends(get_delivery_service)):
    return create_success_response(data=service.stats())


@router.get("/search/user")
def search_delivery_orders_by_user(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    service: DeliveryService = Depends(get_delivery_service),
):
    """按顾客信息搜索外卖订单"""
    orders = service.search_by_user(name=name, email=email, phone=phone)
    return create_success_response(data=orders, count=len(orders))


@router.get("/{order_id}")
def get_delivery_order(order_id: str, service: DeliveryService = Depends(get_delivery_service)):
    return create_success_response(data=service.get(order_id))


@router.post("", status_code=201)
def create_delivery_order(req: DeliveryOrderCreate,
                          service: DeliveryService = Depends(get_delivery_service)):
    """创建外卖订单，total 由服务端计算，配送费单独记录"""
    order = service.create(req)
    return create_success_response(data=order, message="Delivery order created successfully")


@router.put("/{order_id}")
def update_delivery_order(order_id: str, req: DeliveryOrderCreate,
                          service: DeliveryService = Depends(get_delivery_service)):
    order = service.update(order_id, req)
    return create_success_response(data=order, message="Delivery order updated successfully")


@router.patch("/email/{email}")
def patch_delivery_order_by_email(email: str, req: DeliveryOrderPatch,
                                  service: DeliveryService = Depends(get_delivery_service)):
    order = service.patch_by_email(email, req)
    return create_success_response(data=order, message="Delivery order updated successfully")


@router.patch("/{order_id}/status")
def update_delivery_order_status(order_id: str, req: Optional[StatusUpdateRequest] = None,
                                 service: DeliveryService = Depends(get_delivery_service)):
    order = service.update_status(order_id, req.status if req else None)
    return create_success_response(
        data=order, message="Delivery order status updated successfully"
    )


@router.patch("/{order_id}")
def patch_delivery_order(order_id: str, req: DeliveryOrderPatch,
                         service: DeliveryService = Depends(get_delivery_service)):
    order = service.patch(order_id, req)
    return create_success_response(data=order, message="Delivery order updated successfully")


@router.delete("/{order_id}")
def delete_delivery_order(order_id: str, service: DeliveryService = Depends(get_delivery_service)):
    service.delete(order_id)
    return create_success_response(message="Delivery order deleted successfully")
