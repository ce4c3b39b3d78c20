"""Shared domain models for the fitness coach."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that speaks camelCase JSON and accepts snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, object]:
        """Return a JSON-ready dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class ChatMessage(CamelModel):
    """Single chat turn exchanged with the coach."""

    role: Literal["user", "assistant", "model"]
    content: str
