from __future__ import annotations

import math
import re
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


T = TypeVar("T")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


def normalize_email(v: str) -> str:
    value = (v or "").strip().lower()
    if "@" not in value:
        raise ValueError("Please provide a valid email address")
    left, right = value.split("@", 1)
    if not left or not right or not _EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def blank_to_none(v: str | None) -> str | None:
    if v is None:
        return None
    value = v.strip()
    return value or None


class CamelModel(BaseModel):
    """Base for every JSON contract: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class FieldError(CamelModel):
    field: str
    message: str


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler):
        # An unset message or data is left off the wire, not sent as null.
        body = handler(self)
        for key in ("message", "data"):
            if body.get(key) is None:
                body.pop(key, None)
        return body


class Pagination(CamelModel):
    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit else 0
        return cls(current=page, pages=pages, total=total, has_next=page < pages, has_prev=page > 1)
