"""Pydantic schemas for investor accounts."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Account(BaseModel):
    """A named account that owns lots and trade history."""

    account_id: str
    name: str
    created: datetime


class AccountCreate(BaseModel):
    """Schema for creating an account."""

    name: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Account name must not be blank")
        return v


class AccountRename(AccountCreate):
    """Schema for renaming an account."""

    pass
