"""
用户管理服务
本地账号（users / roles 关系表）的查询、创建、更新、删除与统计

业务规则：
- 邮箱统一小写且唯一
- 密码至少 6 位，只保存加盐哈希
- 不能删除自己的账号
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..core.database import DatabaseManager
from ..core.exceptions import NotFoundError, ValidationError
from ..core.security import hash_password
from ..models.base import normalize_email
from ..models.user import Role, User
from .query_builder import ALL

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

USER_COLUMNS = """
    u.id, u.email, u.full_name, u.phone, u.is_active, COALESCE(r.name, 'staff'),
    u.role_id, COALESCE(r.description, ''), u.last_login, u.created_at, u.updated_at
"""

USER_FROM = "FROM users u LEFT JOIN roles r ON r.id = u.role_id"

USER_SORT_FIELDS = {
    "created_at": "u.created_at",
    "createdAt": "u.created_at",
    "updated_at": "u.updated_at",
    "last_login": "u.last_login",
    "email": "u.email",
    "full_name": "u.full_name",
}


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        email=row[1],
        full_name=row[2],
        phone=row[3],
        is_active=row[4],
        role=row[5],
        role_id=row[6],
        role_description=row[7],
        last_login=row[8],
        created_at=row[9],
        updated_at=row[10],
    )


class UserService:
    """本地账号管理"""

    def __init__(self, db: DatabaseManager):
        self.db = db

    # ---------- 查询 ----------

    def list(self, search: Optional[str] = None, role: Optional[str] = None,
             is_active: Optional[bool] = None, sort_by: Optional[str] = None,
             order: Optional[str] = "desc") -> List[User]:
        conditions = []
        params: list = []

        if search and search.strip():
            needle = search.strip()
            conditions.append(
                "(contains(lower(u.email), lower(?)) OR contains(lower(u.full_name), lower(?))"
                " OR contains(lower(COALESCE(u.phone, '')), lower(?)))"
            )
            params.extend([needle, needle, needle])
        if role and role.strip() and role.strip() != ALL:
            conditions.append("COALESCE(r.name, 'staff') = ?")
            params.append(role.strip())
        if is_active is not None:
            conditions.append("u.is_active = ?")
            params.append(is_active)

        where = " WHERE " + " AND ".join(conditions) if conditions else ""
        sort_column = USER_SORT_FIELDS.get(sort_by or "created_at", "u.created_at")
        direction = "ASC" if (order or "desc").lower() == "asc" else "DESC"

        rows = self.db.execute_query(
            f"SELECT {USER_COLUMNS} {USER_FROM}{where} "
            f"ORDER BY {sort_column} {direction} NULLS LAST, u.id {direction}",
            params,
        )
        return [_row_to_user(row) for row in rows]

    def get(self, user_id: int) -> User:
        row = self.db.execute_one(f"SELECT {USER_COLUMNS} {USER_FROM} WHERE u.id = ?", [user_id])
        if not row:
            raise NotFoundError("User not found")
        return _row_to_user(row)

    def get_credentials(self, email: str) -> Optional[Dict[str, Any]]:
        """登录用：按邮箱取出用户及密码哈希"""
        row = self.db.execute_one(
            f"SELECT {USER_COLUMNS}, u.password_hash {USER_FROM} WHERE u.email = ?",
            [normalize_email(email)],
        )
        if not row:
            return None
        return {"user": _row_to_user(row[:-1]), "password_hash": row[-1]}

    def stats(self) -> Dict[str, Any]:
        rows = self.db.execute_query(
            f"""
            SELECT COALESCE(r.name, 'staff') AS role_name,
                   COUNT(*),
                   COUNT(*) FILTER (WHERE u.is_active)
            {USER_FROM}
            GROUP BY role_name
            ORDER BY role_name
            """
        )
        total = sum(int(r[1]) for r in rows)
        active = sum(int(r[2]) for r in rows)
        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "byRole": {r[0]: int(r[1]) for r in rows},
        }

    def roles(self) -> List[Role]:
        rows = self.db.execute_query("SELECT id, name, description FROM roles ORDER BY id")
        return [Role(id=r[0], name=r[1], description=r[2]) for r in rows]

    # ---------- 写入 ----------

    def create(self, data: Mapping[str, Any]) -> User:
        """创建用户：邮箱、密码、姓名、角色必填"""
        email = normalize_email(data.get("email"))
        password = data.get("password")
        full_name = (data.get("full_name") or "").strip()
        role = data.get("role")

        if not email or not password or not full_name or not role:
            raise ValidationError("Email, password, full name, and role are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters long")
        if self._email_exists(email):
            raise ValidationError("User with this email already exists")
        role_id = self._role_id(role)

        row = self.db.execute_one(
            """
            INSERT INTO users (email, password_hash, full_name, phone, role_id, is_active)
            VALUES (?, ?, ?, ?, ?, TRUE)
            RETURNING id
            """,
            [email, hash_password(password), full_name, data.get("phone"), role_id],
        )
        logger.info("User created: %s (%s)", email, role)
        return self.get(row[0])

    def update(self, user_id: int, data: Mapping[str, Any]) -> User:
        """局部更新邮箱、姓名、电话、角色、启用状态"""
        updates: Dict[str, Any] = {}

        if data.get("email"):
            email = normalize_email(data["email"])
            if self._email_exists(email, exclude_id=user_id):
                raise ValidationError("User with this email already exists")
            updates["email"] = email
        if data.get("full_name"):
            updates["full_name"] = data["full_name"].strip()
        if "phone" in data:
            updates["phone"] = data["phone"]
        if data.get("is_active") is not None:
            updates["is_active"] = bool(data["is_active"])
        if data.get("role"):
            updates["role_id"] = self._role_id(data["role"])

        if not updates:
            raise ValidationError("No data provided for update")

        assignments = ", ".join(f"{column} = ?" for column in updates)
        row = self.db.execute_one(
            f"UPDATE users SET {assignments}, updated_at = now() WHERE id = ? RETURNING id",
            [*updates.values(), user_id],
        )
        if not row:
            raise NotFoundError("User not found")
        return self.get(user_id)

    def delete(self, user_id: int, current_user_id: Optional[int] = None) -> None:
        if current_user_id is not None and int(user_id) == int(current_user_id):
            raise ValidationError("Cannot delete your own account")
        row = self.db.execute_one("DELETE FROM users WHERE id = ? RETURNING id", [user_id])
        if not row:
            raise NotFoundError("User not found")
        logger.info("User deleted: %s", user_id)

    def ensure_admin(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        """按配置创建初始管理员，已存在则跳过"""
        if not email or not password:
            return None
        email = normalize_email(email)
        if self._email_exists(email):
            return None
        user = self.create({
            "email": email,
            "password": password,
            "full_name": "Administrator",
            "role": "admin",
        })
        logger.info("Bootstrap administrator created: %s", email)
        return user

    # ---------- 内部方法 ----------

    def _email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        if exclude_id is None:
            row = self.db.execute_one("SELECT 1 FROM users WHERE email = ?", [email])
        else:
            row = self.db.execute_one(
                "SELECT 1 FROM users WHERE email = ? AND id <> ?", [email, exclude_id]
            )
        return row is not None

    def _role_id(self, role: str) -> int:
        row = self.db.execute_one("SELECT id FROM roles WHERE name = ?", [str(role).strip()])
        if not row:
            raise ValidationError("Invalid role specified")
        return row[0]
