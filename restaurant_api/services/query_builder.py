"""
查询构建
把列表接口的过滤/搜索/排序参数转换为存储层的 StoreQuery
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from ..core.document_store import StoreQuery
from ..core.exceptions import ValidationError

# 不过滤的哨兵值
ALL = "all"

DEFAULT_SORT_FIELD = "created_at"

SORT_ALIASES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

USER_SEARCH_FIELDS = (
    ("name", "customer_name"),
    ("email", "customer_email"),
    ("phone", "customer_phone"),
)


def resolve_sort_field(sort_by: Optional[str], sortable_fields: Iterable[str]) -> str:
    """排序字段不在白名单内时回退到创建时间"""
    if not sort_by:
        return DEFAULT_SORT_FIELD
    field = SORT_ALIASES.get(sort_by, sort_by)
    if field in ("created_at", "updated_at") or field in set(sortable_fields):
        return field
    return DEFAULT_SORT_FIELD


def build_list_query(
    search_fields: Iterable[str],
    sortable_fields: Iterable[str] = (),
    filters: Optional[Mapping[str, Any]] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: Optional[str] = "desc",
) -> StoreQuery:
    """
    构建列表查询

    Args:
        search_fields: 关键字搜索覆盖的字段（任一字段包含即命中，不区分大小写）
        sortable_fields: 允许排序的字段
        filters: 等值过滤；值为 None、空串或 "all" 时跳过
        search: 搜索关键字
        sort_by: 排序字段，默认创建时间
        order: "desc" 为降序，其余为升序
    """
    equals: Dict[str, Any] = {}
    for field, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, str) and (not value.strip() or value.strip() == ALL):
            continue
        equals[field] = value.strip() if isinstance(value, str) else value

    contains_any = []
    if search and search.strip():
        needle = search.strip()
        contains_any = [(field, needle) for field in search_fields]

    return StoreQuery(
        equals=equals,
        contains_any=contains_any,
        sort_field=resolve_sort_field(sort_by, sortable_fields),
        descending=(order or "desc").lower() == "desc",
    )


def build_user_search_query(
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> StoreQuery:
    """按顾客姓名/邮箱/电话搜索，只对提供的参数做 OR 匹配，至少需要一个"""
    supplied = {"name": name, "email": email, "phone": phone}
    contains_any = [
        (field, supplied[param].strip())
        for param, field in USER_SEARCH_FIELDS
        if supplied[param] and supplied[param].strip()
    ]
    if not contains_any:
        raise ValidationError(
            "At least one search parameter (name, email, or phone) is required"
        )
    return StoreQuery(contains_any=contains_any, sort_field=DEFAULT_SORT_FIELD, descending=True)
