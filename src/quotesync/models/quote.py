"""Quote domain model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """A short text record with an optional remote-assigned identity.

    Instances are immutable.  A quote whose remote version wins a conflict,
    or that receives an id after a push, is replaced by a new instance.

    Parameters
    ----------
    id : int or None
        Identity assigned by the remote.  ``None`` marks a quote created
        locally that the remote has not accepted yet.
    text : str
        Quote text, non-empty after stripping whitespace.
    category : str
        Category label, non-empty after stripping.  Compared
        case-sensitively.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    id: int | None = None
    text: str = Field(min_length=1)
    category: str = Field(min_length=1)

    @property
    def is_synced(self) -> bool:
        return self.id is not None

    def same_content(self, other: Quote) -> bool:
        """Whether *other* carries the same text and category."""
        return self.text == other.text and self.category == other.category

    def with_id(self, quote_id: int) -> Quote:
        return self.model_copy(update={"id": quote_id})
