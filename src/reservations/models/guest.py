"""Pydantic models for guest profiles stored in the guests table."""

from uuid import UUID

from pydantic import BaseModel


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    state_or_province: str | None = None
    postal_code: str | None = None
    country: str | None = None


class Guest(BaseModel):
    guest_id: UUID | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    emails: set[str] = set()
    phone_numbers: list[str] = []
    addresses: dict[str, Address] = {}
    confirmation_number: str | None = None
