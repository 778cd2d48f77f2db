from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

SMALLINT_MIN = -32768
SMALLINT_MAX = 32767


class Reservation(BaseModel):
    confirmation_number: str | None = None
    hotel_id: str
    start_date: date
    end_date: date
    room_number: int = Field(..., ge=SMALLINT_MIN, le=SMALLINT_MAX)
    guest_id: UUID
