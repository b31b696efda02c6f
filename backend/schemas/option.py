"""Pydantic schemas for dropdown label options."""

from pydantic import BaseModel


class Option(BaseModel):
    """A dropdown option. Account options also carry the account id."""

    label: str
    account_id: str | None = None


class Country(BaseModel):
    label: str
    code: str
    phone: str
    suggested: bool | None = None
