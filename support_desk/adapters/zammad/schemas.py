"""Pydantic schemas for the Zammad payload fields this service relies on."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class ZammadTicket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    number: str | None = None
    title: str | None = None
    customer_id: int | None = None
    owner_id: int | None = None
    group_id: int | None = None
    state_id: int | None = None
    created_at: datetime | None = None

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_str(cls, v):
        return str(v) if v is not None else None


class ZammadUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    login: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    email: str | None = None
    active: bool = True
    role_ids: list[int] = []
    # {"<group id>": ["full", ...]}; only the keys matter
    group_ids: dict[str, list[str]] | None = None
    out_of_office: bool = False
    out_of_office_start_at: datetime | None = None
    out_of_office_end_at: datetime | None = None

    @field_validator("role_ids", mode="before")
    @classmethod
    def _null_roles(cls, v):
        return v or []

    @field_validator("active", "out_of_office", mode="before")
    @classmethod
    def _null_flag(cls, v, info):
        if v is None:
            return info.field_name == "active"
        return v

    @field_validator("group_ids", mode="before")
    @classmethod
    def _groups_as_map(cls, v):
        # Some endpoints return a bare list of ids instead of the access map
        if isinstance(v, list):
            return {str(g): ["full"] for g in v}
        return v

    @field_validator("out_of_office_start_at", "out_of_office_end_at", mode="before")
    @classmethod
    def _blank_as_none(cls, v):
        return v or None

    def group_id_set(self) -> frozenset[int]:
        ids = set()
        for key in (self.group_ids or {}):
            try:
                ids.add(int(key))
            except ValueError:
                continue
        return frozenset(ids)
