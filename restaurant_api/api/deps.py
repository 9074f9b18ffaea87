"""
路由依赖
数据库、文档存储与各服务实例都从 app.state 上的资源构建
"""

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.database import DatabaseManager
from ..core.document_store import DocumentStore
from ..services import (
    AuthService,
    DeliveryService,
    MenuService,
    RealtimeTokenService,
    ReservationService,
    TakeawayService,
    UserService,
)


def get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(db: DatabaseManager = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_menu_service(store: DocumentStore = Depends(get_store)) -> MenuService:
    return MenuService(store)


def get_reservation_service(store: DocumentStore = Depends(get_store),
                            settings: Settings = Depends(get_settings)) -> ReservationService:
    return ReservationService(store, enforce_transitions=settings.enforce_status_transitions)


def get_takeaway_service(store: DocumentStore = Depends(get_store),
                         settings: Settings = Depends(get_settings)) -> TakeawayService:
    return TakeawayService(store, enforce_transitions=settings.enforce_status_transitions)


def get_delivery_service(store: DocumentStore = Depends(get_store),
                         settings: Settings = Depends(get_settings)) -> DeliveryService:
    return DeliveryService(
        store,
        enforce_transitions=settings.enforce_status_transitions,
        default_delivery_fee=settings.default_delivery_fee,
    )


def get_user_service(db: DatabaseManager = Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(request: Request, db: DatabaseManager = Depends(get_db)) -> AuthService:
    return AuthService(db, request.app.state.security_manager)


def get_realtime_service(settings: Settings = Depends(get_settings)) -> RealtimeTokenService:
    return RealtimeTokenService(
        settings.livekit_api_key,
        settings.livekit_api_secret,
        ttl_seconds=settings.livekit_token_ttl_seconds,
    )
