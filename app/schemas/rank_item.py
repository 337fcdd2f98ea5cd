"""Pydantic schemas for ranked items, plus the explicit validation entry point.

The wire format is camelCase (``siteName``, ``welcomeBonus``...); Python code
works with the snake_case attribute names.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Annotated, Any
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_serializer,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.errors import FieldError

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _check_url(value: str | None) -> str | None:
    if value is None:
        return None
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("Must be an http(s) URL")
    return value


def _reject_bool(cls, value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("Rank must be an integer")
    return value


class RankItemIn(BaseModel):
    """Request body for create and update. Every field is optional here;
    completeness is checked by :func:`validate_rank_item` after merging.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    site_name: str | None = None
    logo: str | None = None
    advantages: list[str] | None = None
    welcome_bonus: str | None = None
    payments: list[str] | None = None
    promo_code: str | None = None
    rank: int | None = None
    create_account_url: str | None = None
    download_app_url: str | None = None

    _reject_bool_rank = field_validator("rank", mode="before")(_reject_bool)


class RankItemData(BaseModel):
    """A complete, validated ranked item as supplied by a client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    site_name: NonBlankStr
    logo: NonBlankStr
    advantages: list[NonBlankStr] = Field(min_length=1)
    welcome_bonus: NonBlankStr
    payments: list[NonBlankStr] = Field(min_length=1)
    promo_code: NonBlankStr
    rank: int = Field(ge=1)
    create_account_url: str | None = None
    download_app_url: str | None = None

    _reject_bool_rank = field_validator("rank", mode="before")(_reject_bool)

    @field_validator("create_account_url", "download_app_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("advantages", "payments", mode="before")
    @classmethod
    def _drop_blank_entries(cls, value: Any) -> Any:
        # Form rows left empty by the client are discarded, not rejected.
        if isinstance(value, list):
            return [v for v in value if not (isinstance(v, str) and not v.strip())]
        return value

    @field_validator("create_account_url", "download_app_url")
    @classmethod
    def _optional_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class RankItemOut(BaseModel):
    """A stored ranked item as returned to clients."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    site_name: str
    logo: str
    advantages: list[str]
    welcome_bonus: str
    payments: list[str]
    promo_code: str
    rank: int
    create_account_url: str | None = None
    download_app_url: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _iso_utc(self, value: datetime) -> str:
        # SQLite hands back naive datetimes; they were written in UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()


class MessageOut(BaseModel):
    message: str


# Accepted body keys (camelCase or snake_case) -> attribute name
EDITABLE_FIELDS: dict[str, str] = {
    key: name
    for name, info in RankItemData.model_fields.items()
    for key in (name, info.alias or name)
}


@dataclass
class ValidationResult:
    value: RankItemData | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "body"


def validate_rank_item(data: Any) -> ValidationResult:
    """Validate a complete record. Never raises; errors come back as values."""
    if not isinstance(data, Mapping):
        return ValidationResult(
            errors=[FieldError("body", "Request body must be a JSON object")]
        )
    try:
        value = RankItemData.model_validate(dict(data))
    except PydanticValidationError as e:
        return ValidationResult(
            errors=[
                FieldError(_field_path(err["loc"]), err["msg"])
                for err in e.errors(include_url=False)
            ]
        )
    return ValidationResult(value=value)


def editable_changes(body: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only client-editable keys, renamed to attribute names.

    ``id`` and the timestamps are system-managed and silently dropped.
    """
    return {
        EDITABLE_FIELDS[key]: value
        for key, value in body.items()
        if key in EDITABLE_FIELDS
    }


def parse_item_id(raw: str) -> str | None:
    """Normalize an id to 32-char hex, or ``None`` if it is not a UUID."""
    try:
        return uuid.UUID(raw).hex
    except (ValueError, AttributeError, TypeError):
        return None
