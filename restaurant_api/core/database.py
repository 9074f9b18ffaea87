"""
数据库连接和管理模块
进程内唯一的 DuckDB 连接，启动时显式初始化、关闭时释放
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import duckdb

from .exceptions import DatabaseError

logger = logging.getLogger(__name__)

# 文档集合：每种实体一张表，业务字段整体存为 JSON 文档
DOCUMENT_COLLECTIONS = (
    "menu_items",
    "reservations",
    "takeaway_orders",
    "delivery_orders",
)

DOCUMENT_TABLE_SQL = r"""
CREATE TABLE IF NOT EXISTS {table} (
  id VARCHAR PRIMARY KEY,
  ext_id VARCHAR UNIQUE NOT NULL,
  seq BIGINT DEFAULT nextval('documents_seq'),
  doc VARCHAR NOT NULL,
  created_at TIMESTAMP NOT NULL,
  updated_at TIMESTAMP NOT NULL
);
"""

# 本地账号相关的关系表
SCHEMA_SQL = r"""
CREATE SEQUENCE IF NOT EXISTS documents_seq;

CREATE SEQUENCE IF NOT EXISTS roles_id_seq;
CREATE TABLE IF NOT EXISTS roles (
  id INTEGER DEFAULT nextval('roles_id_seq') PRIMARY KEY,
  name TEXT UNIQUE NOT NULL,
  description TEXT
);

CREATE SEQUENCE IF NOT EXISTS users_id_seq;
CREATE TABLE IF NOT EXISTS users (
  id INTEGER DEFAULT nextval('users_id_seq') PRIMARY KEY,
  email TEXT UNIQUE NOT NULL,
  password_hash TEXT NOT NULL,
  full_name TEXT NOT NULL,
  phone TEXT,
  role_id INTEGER,
  is_active BOOLEAN DEFAULT TRUE,
  last_login TIMESTAMP,
  created_at TIMESTAMP DEFAULT now(),
  updated_at TIMESTAMP DEFAULT now()
);
"""

DEFAULT_ROLES = (
    ("admin", "Full access, including user management"),
    ("manager", "Manages menu, reservations and orders"),
    ("staff", "Handles day-to-day reservations and orders"),
)


class DatabaseManager:
    """数据库管理器，封装连接生命周期与语句执行"""

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """获取数据库连接"""
        if self._connection is None:
            raise DatabaseError("Database is not initialized")
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def init_database(self):
        """打开连接并创建表结构"""
        with self._lock:
            if self._connection is not None:
                return
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            try:
                self._connection = duckdb.connect(self.db_path)
            except duckdb.Error as e:
                raise DatabaseError(f"Failed to open database: {e}")
            self._init_schema()
            logger.info("Database initialized at %s", self.db_path)

    def _init_schema(self):
        """初始化数据库表结构"""
        con = self._connection
        try:
            try:
                con.execute("LOAD json")
            except duckdb.Error:
                # 部分发行版需要先安装扩展
                logger.debug("json extension not loaded, installing")
                con.execute("INSTALL json")
                con.execute("LOAD json")

            con.execute(SCHEMA_SQL)
            for table in DOCUMENT_COLLECTIONS:
                con.execute(DOCUMENT_TABLE_SQL.format(table=table))
            for name, description in DEFAULT_ROLES:
                con.execute(
                    "INSERT INTO roles(name, description) VALUES (?, ?) ON CONFLICT (name) DO NOTHING",
                    [name, description],
                )
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to initialize schema: {e}")

    def close(self):
        """关闭连接"""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.info("Database connection closed")

    @contextmanager
    def cursor(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """持锁访问连接，所有语句串行执行"""
        with self._lock:
            try:
                yield self.connection
            except duckdb.Error as e:
                raise DatabaseError(f"Query execution failed: {e}")

    def execute_query(self, query: str, params: Optional[list] = None) -> list:
        """执行查询并返回结果"""
        with self.cursor() as con:
            return con.execute(query, params or []).fetchall()

    def execute_one(self, query: str, params: Optional[list] = None) -> Optional[tuple]:
        """执行查询并返回单条结果"""
        with self.cursor() as con:
            return con.execute(query, params or []).fetchone()

    def execute(self, query: str, params: Optional[list] = None):
        """执行写操作"""
        with self.cursor() as con:
            con.execute(query, params or [])
