"""
外带订单路由
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...core.security import AuthenticatedIdentity, require_external_identity
from ...models.order import TakeawayOrderCreate, TakeawayOrderPatch
from ...schemas.common import StatusUpdateRequest
from ...services import TakeawayService
from ..deps import get_takeaway_service

router = APIRouter(prefix="/takeaway", tags=["takeaway"])


@router.get("")
def list_takeaway_orders(
    status: Optional[str] = Query(None, description="状态，all 表示不过滤"),
    search: Optional[str] = Query(None, description="按顾客姓名/邮箱/电话/订单号搜索"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: str = Query("desc"),
    service: TakeawayService = Depends(get_takeaway_service),
):
    """获取外带订单列表"""
    orders = service.list(search=search, sort_by=sort_by, order=order, status=status)
    return create_success_response(data=orders, count=len(orders))


@router.get("/stats")
def get_takeaway_stats(service: TakeawayService = Depends(get_takeaway_service)):
    return create_success_response(data=service.stats())


@router.get("/search/user")
def search_takeaway_orders_by_user(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    identity: AuthenticatedIdentity = Depends(require_external_identity),
    service: TakeawayService = Depends(get_takeaway_service),
):
    """按顾客信息搜索外带订单（需第三方身份令牌）"""
    orders = service.search_by_user(name=name, email=email, phone=phone)
    return create_success_response(data=orders, count=len(orders))


@router.get("/{order_id}")
def get_takeaway_order(order_id: str, service: TakeawayService = Depends(get_takeaway_service)):
    return create_success_response(data=service.get(order_id))


@router.post("", status_code=201)
def create_takeaway_order(req: TakeawayOrderCreate,
                          service: TakeawayService = Depends(get_takeaway_service)):
    """创建外带订单，total 由服务端计算"""
    order = service.create(req)
    return create_success_response(data=order, message="Takeaway order created successfully")


@router.put("/{order_id}")
def update_takeaway_order(order_id: str, req: TakeawayOrderCreate,
                          service: TakeawayService = Depends(get_takeaway_service)):
    order = service.update(order_id, req)
    return create_success_response(data=order, message="Takeaway order updated successfully")


@router.patch("/email/{email}")
def patch_takeaway_order_by_email(email: str, req: TakeawayOrderPatch,
                                  service: TakeawayService = Depends(get_takeaway_service)):
    order = service.patch_by_email(email, req)
    return create_success_response(data=order, message="Takeaway order updated successfully")


@router.patch("/{order_id}/status")
def update_takeaway_order_status(order_id: str, req: Optional[StatusUpdateRequest] = None,
                                 service: TakeawayService = Depends(get_takeaway_service)):
    order = service.update_status(order_id, req.status if req else None)
    return create_success_response(
        data=order, message="Takeaway order status updated successfully"
    )


@router.patch("/{order_id}")
def patch_takeaway_order(order_id: str, req: TakeawayOrderPatch,
                         service: TakeawayService = Depends(get_takeaway_service)):
    order = service.patch(order_id, req)
    return create_success_response(data=order, message="Takeaway order updated successfully")


@router.delete("/{order_id}")
def delete_takeaway_order(order_id: str, service: TakeawayService = Depends(get_takeaway_service)):
    service.delete(order_id)
    return create_success_response(message="Takeaway order deleted successfully")
