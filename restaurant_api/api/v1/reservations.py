"""
预订路由
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...models.reservation import ReservationCreate, ReservationPatch
from ...schemas.common import StatusUpdateRequest
from ...services import ReservationService
from ..deps import get_reservation_service

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("")
def list_reservations(
    status: Optional[str] = Query(None, description="状态，all 表示不过滤"),
    search: Optional[str] = Query(None, description="按顾客姓名/邮箱/电话/预订号搜索"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: str = Query("desc"),
    service: ReservationService = Depends(get_reservation_service),
):
    """获取预订列表"""
    reservations = service.list(search=search, sort_by=sort_by, order=order, status=status)
    return create_success_response(data=reservations, count=len(reservations))


@router.get("/stats")
def get_reservation_stats(service: ReservationService = Depends(get_reservation_service)):
    return create_success_response(data=service.stats())


@router.get("/search/user")
def search_reservations_by_user(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    service: ReservationService = Depends(get_reservation_service),
):
    """按顾客信息搜索预订"""
    reservations = service.search_by_user(name=name, email=email, phone=phone)
    return create_success_response(data=reservations, count=len(reservations))


@router.get("/{booking_id}")
def get_reservation(booking_id: str, service: ReservationService = Depends(get_reservation_service)):
    return create_success_response(data=service.get(booking_id))


@router.post("", status_code=201)
def create_reservation(req: ReservationCreate,
                       service: ReservationService = Depends(get_reservation_service)):
    reservation = service.create(req)
    return create_success_response(data=reservation, message="Reservation created successfully")


@router.put("/{booking_id}")
def update_reservation(booking_id: str, req: ReservationCreate,
                       service: ReservationService = Depends(get_reservation_service)):
    """整体更新预订"""
    reservation = service.update(booking_id, req)
    return create_success_response(data=reservation, message="Reservation updated successfully")


@router.patch("/email/{email}")
def patch_reservation_by_email(email: str, req: ReservationPatch,
                               service: ReservationService = Depends(get_reservation_service)):
    """按顾客邮箱局部更新最近的一条预订"""
    reservation = service.patch_by_email(email, req)
    return create_success_response(data=reservation, message="Reservation updated successfully")


@router.patch("/{booking_id}/status")
def update_reservation_status(booking_id: str, req: Optional[StatusUpdateRequest] = None,
                              service: ReservationService = Depends(get_reservation_service)):
    reservation = service.update_status(booking_id, req.status if req else None)
    return create_success_response(
        data=reservation, message="Reservation status updated successfully"
    )


@router.patch("/{booking_id}")
def patch_reservation(booking_id: str, req: ReservationPatch,
                      service: ReservationService = Depends(get_reservation_service)):
    reservation = service.patch(booking_id, req)
    return create_success_response(data=reservation, message="Reservation updated successfully")


@router.delete("/{booking_id}")
def delete_reservation(booking_id: str, service: ReservationService = Depends(get_reservation_service)):
    service.delete(booking_id)
    return create_success_response(message="Reservation deleted successfully")
