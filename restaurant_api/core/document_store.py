"""
文档存储
在 DuckDB 上实现按集合存取 JSON 文档：每条记录有内部主键 id、
业务外部编号 ext_id，以及由存储层维护的 created_at / updated_at
"""

import json
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .database import DOCUMENT_COLLECTIONS, DatabaseManager

TIMESTAMP_FIELDS = ("created_at", "updated_at")

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

_RECORD_COLUMNS = "id, doc, created_at, updated_at"


@dataclass
class StoreQuery:
    """集合查询条件：等值过滤（AND）+ 子串匹配（OR）+ 排序"""
    equals: Dict[str, Any] = field(default_factory=dict)
    contains_any: List[Tuple[str, str]] = field(default_factory=list)
    sort_field: str = "created_at"
    descending: bool = True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _field_expr(name: str) -> str:
    """文档字段对应的 SQL 表达式，字段名必须是合法标识符"""
    if not _FIELD_RE.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return f"json_extract_string(doc, '$.{name}')"


def _scalar_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DocumentStore:
    """文档集合的增删改查"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def _table(self, collection: str) -> str:
        if collection not in DOCUMENT_COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection!r}")
        return collection

    @staticmethod
    def _to_record(row: tuple) -> Dict[str, Any]:
        internal_id, doc, created_at, updated_at = row
        record = json.loads(doc)
        record["id"] = internal_id
        record["created_at"] = created_at.isoformat() if created_at else None
        record["updated_at"] = updated_at.isoformat() if updated_at else None
        return record

    def insert(self, collection: str, ext_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """插入新文档，返回带存储字段的完整记录"""
        table = self._table(collection)
        now = _utcnow()
        row = self.db.execute_one(
            f"INSERT INTO {table}(id, ext_id, doc, created_at, updated_at) VALUES (?,?,?,?,?) "
            f"RETURNING {_RECORD_COLUMNS}",
            [uuid.uuid4().hex, ext_id, json.dumps(doc), now, now],
        )
        return self._to_record(row)

    def find_one(self, collection: str, ext_id: str) -> Optional[Dict[str, Any]]:
        table = self._table(collection)
        row = self.db.execute_one(
            f"SELECT {_RECORD_COLUMNS} FROM {table} WHERE ext_id = ?", [ext_id]
        )
        return self._to_record(row) if row else None

    def find_latest_by_field(self, collection: str, field_name: str,
                             value: Any) -> Optional[Dict[str, Any]]:
        """按字段等值匹配，多条时取最新创建的一条"""
        table = self._table(collection)
        row = self.db.execute_one(
            f"SELECT {_RECORD_COLUMNS} FROM {table} WHERE {_field_expr(field_name)} = ? "
            "ORDER BY created_at DESC, seq DESC LIMIT 1",
            [_scalar_param(value)],
        )
        return self._to_record(row) if row else None

    def find(self, collection: str, query: Optional[StoreQuery] = None) -> List[Dict[str, Any]]:
        """按条件查询文档列表"""
        table = self._table(collection)
        query = query or StoreQuery()

        where, params = self._where_clause(query)
        direction = "DESC" if query.descending else "ASC"

        if query.sort_field in TIMESTAMP_FIELDS:
            order_by = f"{query.sort_field} {direction}, seq {direction}"
        else:
            expr = _field_expr(query.sort_field)
            order_by = (
                f"TRY_CAST({expr} AS DOUBLE) {direction} NULLS LAST, "
                f"{expr} {direction} NULLS LAST, created_at DESC, seq DESC"
            )

        rows = self.db.execute_query(
            f"SELECT {_RECORD_COLUMNS} FROM {table}{where} ORDER BY {order_by}", params
        )
        return [self._to_record(row) for row in rows]

    def replace(self, collection: str, ext_id: str, doc: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """整体替换文档内容，编号和创建时间保持不变"""
        table = self._table(collection)
        row = self.db.execute_one(
            f"UPDATE {table} SET doc = ?, updated_at = ? WHERE ext_id = ? RETURNING {_RECORD_COLUMNS}",
            [json.dumps(doc), _utcnow(), ext_id],
        )
        return self._to_record(row) if row else None

    def delete(self, collection: str, ext_id: str) -> bool:
        table = self._table(collection)
        row = self.db.execute_one(
            f"DELETE FROM {table} WHERE ext_id = ? RETURNING id", [ext_id]
        )
        return row is not None

    def count(self, collection: str, equals: Optional[Dict[str, Any]] = None) -> int:
        table = self._table(collection)
        where, params = self._where_clause(StoreQuery(equals=equals or {}))
        row = self.db.execute_one(f"SELECT COUNT(*) FROM {table}{where}", params)
        return int(row[0])

    def aggregate(self, collection: str, group_field: str,
                  sum_fields: Sequence[str] = (),
                  avg_field: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        按字段分组统计

        Returns:
            [{"key", "count", "sum", "avg"}]，sum 为 sum_fields 逐条相加后的合计
        """
        table = self._table(collection)
        group_expr = _field_expr(group_field)

        columns = [f"{group_expr} AS grp", "COUNT(*) AS cnt"]
        if sum_fields:
            addends = " + ".join(
                f"COALESCE(TRY_CAST({_field_expr(f)} AS DOUBLE), 0)" for f in sum_fields
            )
            columns.append(f"SUM({addends}) AS total")
        else:
            columns.append("NULL AS total")
        if avg_field:
            columns.append(f"AVG(TRY_CAST({_field_expr(avg_field)} AS DOUBLE)) AS average")
        else:
            columns.append("NULL AS average")

        rows = self.db.execute_query(
            f"SELECT {', '.join(columns)} FROM {table} GROUP BY grp ORDER BY grp"
        )
        return [
            {"key": grp, "count": int(cnt), "sum": total, "avg": average}
            for grp, cnt, total, average in rows
        ]

    @staticmethod
    def _where_clause(query: StoreQuery) -> Tuple[str, list]:
        conditions: List[str] = []
        params: list = []

        for name, value in query.equals.items():
            conditions.append(f"{_field_expr(name)} = ?")
            params.append(_scalar_param(value))

        if query.contains_any:
            ors = []
            for name, needle in query.contains_any:
                ors.append(f"contains(lower({_field_expr(name)}), lower(?))")
                params.append(needle)
            conditions.append("(" + " OR ".join(ors) + ")")

        if not conditions:
            return "", params
        return " WHERE " + " AND ".join(conditions), params
