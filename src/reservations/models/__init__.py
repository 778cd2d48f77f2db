"""
Pydantic models for the reservation data layer.
"""

from reservations.models.guest import Address, Guest
from reservations.models.reservation import Reservation

__all__ = ["Address", "Guest", "Reservation"]
