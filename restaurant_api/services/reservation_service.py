"""
预订服务
"""

from ..models.reservation import (
    RESERVATION_TRANSITIONS,
    ReservationCreate,
    ReservationPatch,
    ReservationStatus,
)
from .entity_service import CustomerEntityService


class ReservationService(CustomerEntityService):
    collection = "reservations"
    id_field = "booking_id"
    id_prefix = "BK"
    id_suffix_length = 9
    label = "Reservation"

    create_model = ReservationCreate
    patch_model = ReservationPatch

    search_fields = ("customer_name", "customer_email", "customer_phone", "booking_id")
    sortable_fields = ("reservation_time", "party_size", "status", "customer_name")

    status_enum = ReservationStatus
    transitions = RESERVATION_TRANSITIONS
