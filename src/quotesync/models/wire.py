"""Remote wire records and their mapping to :class:`Quote`."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from quotesync._constants import SERVER_CATEGORY_PREFIX
from quotesync._normalize import safe_int, safe_str
from quotesync.models.quote import Quote


class RemoteRecord(BaseModel):
    """A record as returned by the remote collection endpoint.

    The remote stores posts (``{id, title, body, userId}``), not quotes;
    :meth:`to_quote` maps one onto the domain shape.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: int | None = None
    title: str | None = None
    body: str | None = None
    user_id: int | str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("title", "body", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> int | str | None:
        parsed = safe_int(value)
        if parsed is not None:
            return parsed
        return safe_str(value)

    @property
    def category(self) -> str:
        suffix = "unknown" if self.user_id is None else self.user_id
        return f"{SERVER_CATEGORY_PREFIX}{suffix}"

    def to_quote(self) -> Quote | None:
        """Map to a :class:`Quote`, or ``None`` when the record has no id or text."""
        text = self.title or self.body
        if self.id is None or not text:
            return None
        return Quote(id=self.id, text=text, category=self.category)


class CreateRecordRequest(BaseModel):
    """Body sent to create a record from an unsynced quote."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    title: str
    body: str
    user_id: int

    @classmethod
    def from_quote(cls, quote: Quote, *, user_id: int) -> CreateRecordRequest:
        return cls(title=quote.text, body=quote.category, user_id=user_id)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
