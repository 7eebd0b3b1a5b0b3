"""Event envelope shared by every event the orders service publishes or consumes.

Wire shape (camelCase)::

    {"name": str, "version": 1, "payload": {...},
     "metadata": {"correlationId": str, "causationId"?: str, "occurredAt": ISO-8601}}
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class EventMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    correlation_id: str = Field(alias="correlationId", min_length=1)
    causation_id: str | None = Field(default=None, alias="causationId")
    occurred_at: datetime = Field(alias="occurredAt")

    @classmethod
    def build(
        cls,
        correlation_id: str | None = None,
        causation_id: str | None = None,
        occurred_at: datetime | None = None,
    ) -> "EventMetadata":
        """Metadata for a new event; a fresh correlation id is minted when none is supplied."""
        return cls(
            correlation_id=correlation_id or str(uuid4()),
            causation_id=causation_id or None,
            occurred_at=occurred_at or datetime.now(UTC),
        )


class EventEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    version: int = 1
    payload: dict[str, Any]
    metadata: EventMetadata

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
