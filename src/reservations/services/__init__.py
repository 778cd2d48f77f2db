"""
Data access services for reservations and guests.

- reservation_store.py: denormalized reservation reads and writes
- guest_store.py: guest profiles with labeled addresses
"""

from reservations.services.guest_store import GuestStore
from reservations.services.reservation_store import ReservationStore

__all__ = ["GuestStore", "ReservationStore"]
