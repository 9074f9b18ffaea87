"""
菜单服务
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.exceptions import ValidationError
from ..models.menu import MenuItemCreate, MenuItemPatch
from .entity_service import EntityService

logger = logging.getLogger(__name__)


class MenuService(EntityService):
    collection = "menu_items"
    id_field = "item_id"
    id_prefix = "MI"
    label = "Menu item"

    create_model = MenuItemCreate
    patch_model = MenuItemPatch

    search_fields = ("name", "description", "tags")
    sortable_fields = ("name", "price", "category")

    def list(self, search: Optional[str] = None, sort_by: Optional[str] = None,
             order: Optional[str] = "desc", category: Optional[str] = None,
             available: Optional[bool] = None) -> List[Dict[str, Any]]:
        if isinstance(category, str):
            category = category.strip().lower()
        return super().list(
            search=search, sort_by=sort_by, order=order,
            category=category, available=available,
        )

    def update_availability(self, item_id: str, available: Optional[bool]) -> Dict[str, Any]:
        """只更新供应状态"""
        if available is None:
            raise ValidationError("Availability status is required")
        current = self.get(item_id)
        doc = self._document_of(current)
        doc["available"] = bool(available)
        record = self._save(current, doc)
        logger.info("Menu item %s availability: %s", item_id, record["available"])
        return record

    def stats(self) -> Dict[str, Any]:
        groups = self.store.aggregate(self.collection, "category", avg_field="price")
        total = sum(g["count"] for g in groups)
        available = self.store.count(self.collection, {"available": True})
        return {
            "total": total,
            "available": available,
            "unavailable": total - available,
            "byCategory": [
                {
                    "_id": g["key"],
                    "count": g["count"],
                    "avgPrice": round(g["avg"], 2) if g["avg"] is not None else 0,
                }
                for g in groups
            ],
        }
