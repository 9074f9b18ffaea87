"""
Business logic services.
Contains the entity services plus local accounts and real-time tokens.
"""

from .auth_service import AuthService
from .delivery_service import DeliveryService
from .entity_service import CustomerEntityService, EntityService, OrderEntityService
from .menu_service import MenuService
from .realtime_service import RealtimeTokenService
from .reservation_service import ReservationService
from .takeaway_service import TakeawayService
from .user_service import UserService

__all__ = [
    "AuthService",
    "CustomerEntityService",
    "DeliveryService",
    "EntityService",
    "MenuService",
    "OrderEntityService",
    "RealtimeTokenService",
    "ReservationService",
    "TakeawayService",
    "UserService",
]
