"""
菜单路由
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...models.menu import MenuItemCreate, MenuItemPatch
from ...schemas.common import AvailabilityUpdateRequest
from ...services import MenuService
from ..deps import get_menu_service

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("")
def list_menu_items(
    category: Optional[str] = Query(None, description="分类，all 表示不过滤"),
    available: Optional[bool] = Query(None, description="是否供应"),
    search: Optional[str] = Query(None, description="按名称/描述/标签搜索"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: str = Query("desc"),
    service: MenuService = Depends(get_menu_service),
):
    """获取菜单列表"""
    items = service.list(
        search=search, sort_by=sort_by, order=order,
        category=category, available=available,
    )
    return create_success_response(data=items, count=len(items))


@router.get("/stats")
def get_menu_stats(service: MenuService = Depends(get_menu_service)):
    """菜单统计"""
    return create_success_response(data=service.stats())


@router.get("/{item_id}")
def get_menu_item(item_id: str, service: MenuService = Depends(get_menu_service)):
    return create_success_response(data=service.get(item_id))


@router.post("", status_code=201)
def create_menu_item(req: MenuItemCreate, service: MenuService = Depends(get_menu_service)):
    item = service.create(req)
    return create_success_response(data=item, message="Menu item created successfully")


@router.put("/{item_id}")
def update_menu_item(item_id: str, req: MenuItemCreate,
                     service: MenuService = Depends(get_menu_service)):
    """整体更新菜品"""
    item = service.update(item_id, req)
    return create_success_response(data=item, message="Menu item updated successfully")


@router.patch("/{item_id}/availability")
def update_menu_item_availability(item_id: str, req: Optional[AvailabilityUpdateRequest] = None,
                                  service: MenuService = Depends(get_menu_service)):
    """只更新供应状态"""
    item = service.update_availability(item_id, req.available if req else None)
    return create_success_response(
        data=item, message="Menu item availability updated successfully"
    )


@router.patch("/{item_id}")
def patch_menu_item(item_id: str, req: MenuItemPatch,
                    service: MenuService = Depends(get_menu_service)):
    """局部更新菜品"""
    item = service.patch(item_id, req)
    return create_success_response(data=item, message="Menu item updated successfully")


@router.delete("/{item_id}")
def delete_menu_item(item_id: str, service: MenuService = Depends(get_menu_service)):
    service.delete(item_id)
    return create_success_response(message="Menu item deleted successfully")
