"""Shared pydantic base: snake_case in Python, camelCase on the wire."""

import math
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (``round`` rounds halves to even)."""
    return math.floor(value + 0.5)
