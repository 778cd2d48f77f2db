"""Row to entity mapping. Pure functions over driver rows."""

from datetime import date
from typing import Any

from reservations.models import Address, Guest, Reservation


def _as_date(value: Any) -> date:
    # cassandra.util.Date wraps days since epoch; datetime.date passes through
    if isinstance(value, date):
        return value
    return value.date()


def _as_address(value: Any) -> Address:
    if isinstance(value, Address):
        return value
    if isinstance(value, dict):
        return Address(**value)
    return Address(**value._asdict())


def row_to_reservation(row: Any) -> Reservation:
    return Reservation(
        hotel_id=row.hotel_id,
        confirmation_number=row.confirmation_number,
        guest_id=row.guest_id,
        room_number=row.room_number,
        start_date=_as_date(row.start_date),
        end_date=_as_date(row.end_date),
    )


def row_to_guest(row: Any) -> Guest:
    return Guest(
        guest_id=row.guest_id,
        first_name=row.first_name,
        last_name=row.last_name,
        title=row.title,
        emails=set(row.emails or ()),
        phone_numbers=list(row.phone_numbers or ()),
        addresses={label: _as_address(address) for label, address in (row.addresses or {}).items()},
        confirmation_number=row.confirmation_number,
    )
