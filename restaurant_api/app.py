"""
餐厅管理系统后端服务 - 主应用入口
菜单、预订、外带订单、外卖订单的 REST API

主要功能模块：
- 菜单管理
- 预订管理
- 外带/外卖订单处理与营收统计
- 本地账号（登录、用户管理）与第三方身份认证
- 实时会话令牌签发

技术栈：FastAPI + DuckDB + JWT认证
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_router
from .config.settings import Settings, settings as default_settings
from .core.database import DatabaseManager
from .core.error_handler import (
    application_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.exceptions import BaseApplicationError
from .core.security import FirebaseIdentityProvider, SecurityManager, SessionIdentityProvider
from .services.user_service import UserService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("restaurant_api").setLevel(level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理：启动时打开数据库，关闭时释放"""
    db: DatabaseManager = app.state.db
    config: Settings = app.state.settings

    db.init_database()
    UserService(db).ensure_admin(config.admin_email, config.admin_password)
    logger.info("%s %s started (%s)", config.api_title, config.api_version, config.environment)

    yield

    db.close()


def create_app(settings: Optional[Settings] = None, db: Optional[DatabaseManager] = None) -> FastAPI:
    """创建FastAPI应用"""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Restaurant management API",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # 进程内共享资源
    app.state.settings = settings
    app.state.db = db or DatabaseManager(settings.database_path)
    app.state.security_manager = SecurityManager(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_hours=settings.jwt_expire_hours,
    )
    app.state.session_identity_provider = SessionIdentityProvider(
        app.state.security_manager, app.state.db
    )
    app.state.external_identity_provider = FirebaseIdentityProvider(
        settings.firebase_project_id, settings.firebase_jwks_url
    )

    # 添加中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册异常处理器
    app.state.include_stack = not settings.is_production
    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # 注册路由
    app.include_router(api_router, prefix=settings.api_prefix)

    # 健康检查
    @app.get("/health")
    def health_check():
        return {
            "status": "healthy" if app.state.db.is_open else "unhealthy",
            "version": settings.api_version,
            "environment": settings.environment,
        }

    @app.get("/")
    def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "docs": "/docs",
        }

    return app


# 应用实例
app = create_app()
