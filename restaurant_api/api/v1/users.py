"""
用户管理路由（仅管理员）
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.error_handler import create_success_response
from ...core.security import AuthenticatedIdentity, require_roles
from ...schemas.user import UserCreateRequest, UserUpdateRequest
from ...services import UserService
from ..deps import get_user_service

router = APIRouter(tags=["users"])

require_admin = require_roles("admin")


@router.get("/users")
def list_users(
    search: Optional[str] = Query(None, description="按邮箱/姓名/电话搜索"),
    role: Optional[str] = Query(None, description="角色，all 表示不过滤"),
    is_active: Optional[bool] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: str = Query("desc"),
    admin: AuthenticatedIdentity = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    users = service.list(search=search, role=role, is_active=is_active, sort_by=sort_by, order=order)
    return create_success_response(
        data=[u.model_dump(mode="json") for u in users], count=len(users)
    )


@router.get("/users/stats")
def get_user_stats(admin: AuthenticatedIdentity = Depends(require_admin),
                   service: UserService = Depends(get_user_service)):
    return create_success_response(data=service.stats())


@router.get("/users/{user_id}")
def get_user(user_id: int, admin: AuthenticatedIdentity = Depends(require_admin),
             service: UserService = Depends(get_user_service)):
    return create_success_response(data=service.get(user_id).model_dump(mode="json"))


@router.post("/users", status_code=201)
def create_user(req: UserCreateRequest, admin: AuthenticatedIdentity = Depends(require_admin),
                service: UserService = Depends(get_user_service)):
    user = service.create(req.model_dump())
    return create_success_response(data=user.model_dump(mode="json"), message="User created successfully")


@router.put("/users/{user_id}")
def update_user(user_id: int, req: UserUpdateRequest,
                admin: AuthenticatedIdentity = Depends(require_admin),
                service: UserService = Depends(get_user_service)):
    """只更新请求中提供的字段"""
    user = service.update(user_id, req.model_dump(exclude_unset=True))
    return create_success_response(data=user.model_dump(mode="json"), message="User updated successfully")


@router.delete("/users/{user_id}")
def delete_user(user_id: int, admin: AuthenticatedIdentity = Depends(require_admin),
                service: UserService = Depends(get_user_service)):
    service.delete(user_id, current_user_id=int(admin.id))
    return create_success_response(message="User deleted successfully")


@router.get("/roles")
def list_roles(admin: AuthenticatedIdentity = Depends(require_admin),
               service: UserService = Depends(get_user_service)):
    roles = service.roles()
    return create_success_response(data=[r.model_dump() for r in roles])
